"""Task detail modal with syntax-highlighted fields."""

import yaml
from rich.syntax import Syntax as RichSyntax
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static

from ...models import Task


def format_task_for_detail(task: Task) -> str:
    """Render the task's payload fields as YAML."""
    data = task.model_dump(by_alias=True, exclude_none=True)
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


class TaskDetailModal(ModalScreen[None]):
    """Read-only view of a task's fields. Any key closes it."""

    DEFAULT_CSS = """
    TaskDetailModal {
        align: center middle;
    }

    TaskDetailModal > VerticalScroll {
        width: 80%;
        height: 80%;
        border: solid $primary;
        background: $surface;
    }

    TaskDetailModal > VerticalScroll > #title-bar {
        height: 1;
        width: 100%;
        background: $primary-darken-2;
        color: $text;
        text-align: center;
    }

    TaskDetailModal > VerticalScroll > #content {
        width: 100%;
        height: auto;
        padding: 0 1;
    }

    TaskDetailModal > VerticalScroll > #footer-bar {
        height: 1;
        width: 100%;
        background: $surface-lighten-1;
        color: $text-muted;
        text-align: center;
        dock: bottom;
    }
    """

    # Keys that should scroll content, not dismiss
    SCROLL_KEYS = {"up", "down", "pageup", "pagedown", "home", "end"}

    def __init__(self, task_data: Task) -> None:
        super().__init__()
        self._task_data = task_data

    def compose(self) -> ComposeResult:
        syntax = RichSyntax(
            format_task_for_detail(self._task_data),
            "yaml",
            theme="github-dark",
            word_wrap=True,
        )

        with VerticalScroll():
            yield Static(self._task_data.display_title, id="title-bar")
            yield Static(syntax, id="content")
            yield Static("[any key] Close", id="footer-bar")

    def on_key(self, event) -> None:
        """Handle key events - scroll keys scroll, others dismiss."""
        if event.key in self.SCROLL_KEYS:
            return
        event.stop()
        self.dismiss(None)
