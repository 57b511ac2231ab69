"""Task card widget."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widget import Widget
from textual.widgets import Static

from ...drag import encode_task
from ...models import Task


class TaskCard(Widget, can_focus=True):
    """A task card displayed in a section column."""

    # Priority display mapping: (symbol, color)
    PRIORITY_DISPLAY: dict[str, tuple[str, str]] = {
        "low": ("○", "green"),
        "medium": ("●", "yellow"),
        "high": ("●", "red"),
        "urgent": ("▲", "red"),
    }

    def __init__(
        self,
        task_data: Task,
        section_id: str,
        index: int,
        *args,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._task_data = task_data
        self.section_id = section_id
        self.index = index

    @property
    def task(self) -> Task:  # pyrefly: ignore[bad-override]
        """Get the task for this card."""
        return self._task_data

    @property
    def token(self) -> str | None:
        """Drag token for this card, None for tasks without an id."""
        if not self._task_data.id:
            return None
        return encode_task(self.section_id, self._task_data.id, self.index)

    def compose(self) -> ComposeResult:
        """Create card layout."""
        title = self._truncate(self._task_data.display_title, 40)
        yield Static(title, classes="task-title")

        priority_text = self._format_priority()
        due_text = self._format_due()
        if due_text:
            with Horizontal(classes="task-meta"):
                yield Static(priority_text, classes="task-priority")
                yield Static(due_text, classes="task-due")
        else:
            yield Static(priority_text, classes="task-priority")

        preview = self._get_description_preview()
        if preview:
            yield Static(preview, classes="task-preview")

    def _format_priority(self) -> str:
        """Format priority for display."""
        priority = self._task_data.priority
        if not priority:
            return "[dim]—[/]"
        symbol, color = self.PRIORITY_DISPLAY.get(priority.lower(), ("●", "white"))
        return f"[{color}]{symbol}[/] {priority}"

    def _format_due(self) -> str:
        """Format due date. Returns empty string if none."""
        if not self._task_data.due_date:
            return ""
        # Payload dates are ISO timestamps; the date part is enough here
        return f"[dim]due {self._task_data.due_date[:10]}[/]"

    def _truncate(self, text: str, max_len: int) -> str:
        """Truncate text with ellipsis."""
        if len(text) <= max_len:
            return text
        return text[: max_len - 1] + "…"

    def _get_description_preview(self) -> str:
        """Get first non-empty line of the description."""
        for line in (self._task_data.description or "").split("\n"):
            line = line.strip()
            if line:
                return self._truncate(line, 50)
        return ""
