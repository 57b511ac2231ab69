"""Section column widget."""

from __future__ import annotations

from textual.actions import SkipAction
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widget import Widget
from textual.widgets import Static

from ...drag import encode_container, encode_placeholder, encode_section
from ...models import Section
from .task_card import TaskCard


class TaskListScroll(VerticalScroll):
    """Scroll container for task lists.

    Raises SkipAction for navigation keys so they bubble up to the App
    for task navigation instead of being handled as scroll actions.
    """

    def action_scroll_up(self) -> None:
        """Skip scroll_up action to allow key to bubble."""
        raise SkipAction()

    def action_scroll_down(self) -> None:
        """Skip scroll_down action to allow key to bubble."""
        raise SkipAction()

    def action_scroll_home(self) -> None:
        """Skip scroll_home action to allow key to bubble."""
        raise SkipAction()

    def action_scroll_end(self) -> None:
        """Skip scroll_end action to allow key to bubble."""
        raise SkipAction()


class SectionHeader(Static):
    """Section title; the handle for dragging the whole section."""

    def __init__(self, section: Section, *args, **kwargs) -> None:
        count = len(section.tasks)
        super().__init__(f"{section.name} [dim]({count})[/]", *args, **kwargs)
        self.token = encode_section(section.id)


class EmptySectionMessage(Static):
    """Drop placeholder displayed when a section has no tasks."""

    def __init__(self, section: Section, *args, **kwargs) -> None:
        super().__init__("Drop tasks here", *args, **kwargs)
        self.token = encode_placeholder(section.id)


class SectionColumn(Widget):
    """A single section in the board, rendering its tasks in order."""

    def __init__(self, section: Section, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.section = section

    @property
    def token(self) -> str:
        """Container token: dropping here appends to the section."""
        return encode_container(self.section.id)

    @property
    def section_token(self) -> str:
        return encode_section(self.section.id)

    def compose(self) -> ComposeResult:
        """Create column layout."""
        yield SectionHeader(self.section, classes="section-header")
        with TaskListScroll(classes="section-content"):
            if not self.section.tasks:
                yield EmptySectionMessage(self.section, classes="section-placeholder")
            for idx, task in enumerate(self.section.tasks):
                yield TaskCard(task, self.section.id, idx)

    @property
    def cards(self) -> list[TaskCard]:
        return list(self.query(TaskCard))

    @property
    def task_count(self) -> int:
        return len(self.section.tasks)

    # --- Pointer hit testing ---

    def draggable_at(self, x: int, y: int) -> str | None:
        """Token of the section header or task card under a screen point."""
        if not self.region.contains(x, y):
            return None
        header = self.query_one(SectionHeader)
        if header.region.contains(x, y):
            return header.token
        for card in self.cards:
            if card.region.contains(x, y):
                return card.token
        return None

    def droppable_at(self, x: int, y: int, section_drag: bool = False) -> str | None:
        """Innermost drop target under a screen point (pointer-within)."""
        if not self.region.contains(x, y):
            return None
        if section_drag:
            return self.section_token
        for card in self.cards:
            if card.region.contains(x, y) and card.token:
                return card.token
        for placeholder in self.query(EmptySectionMessage):
            if placeholder.region.contains(x, y):
                return placeholder.token
        return self.token

    def widget_for(self, token: str) -> Widget | None:
        """Widget rendering a given token within this column."""
        if token in (self.token, self.section_token):
            return self
        for placeholder in self.query(EmptySectionMessage):
            if placeholder.token == token:
                return placeholder
        for card in self.cards:
            if card.token == token:
                return card
        return None

    # --- Focus ---

    def focus_task(self, index: int) -> bool:
        """
        Focus the task at the given index.

        Returns:
            True if a task was focused, False otherwise
        """
        cards = self.cards
        if not cards or index < 0 or index >= len(cards):
            return False
        card = cards[index]
        card.focus()
        card.scroll_visible()
        return True

    def get_task_card(self, index: int) -> TaskCard | None:
        """Get the card at index."""
        cards = self.cards
        if 0 <= index < len(cards):
            return cards[index]
        return None
