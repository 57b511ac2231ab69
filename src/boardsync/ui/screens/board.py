"""Main kanban board screen."""

from __future__ import annotations

import logging

from textual import events
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widget import Widget
from textual.widgets import Footer, Header, Static

from ...drag import (
    ActivationConstraint,
    PointerSensor,
    encode_section,
    next_target,
)
from ...drag.keyboard import Direction
from ...models import Board, BoardOptions, Task, TaskRef
from ...services import BoardService
from ..widgets.section_column import SectionColumn

logger = logging.getLogger(__name__)


def activation_constraint(options: BoardOptions) -> ActivationConstraint:
    """Pointer activation thresholds from board options."""
    if options.activation == "delay":
        return ActivationConstraint.touch(options.touch_delay, options.touch_tolerance)
    return ActivationConstraint.mouse(options.mouse_distance)


class BoardScreen(Screen):
    """Board screen: renders state and turns pointer/keyboard input into drags."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._current_section = 0
        self._current_task = 0
        self._focus_task_id: str | None = None
        self._sensor: PointerSensor | None = None
        # Token of the drop target while dragging (pointer or keyboard)
        self._drop_token: str | None = None
        self._keyboard_drag = False
        self._highlighted: Widget | None = None
        self._dragging: Widget | None = None
        self._unsubscribe = None

    @property
    def service(self) -> BoardService:
        return self.app.board_service  # pyrefly: ignore[missing-attribute]

    @property
    def board(self) -> Board | None:
        return self.service.board

    @property
    def is_dragging(self) -> bool:
        return self.service.session.is_active

    def compose(self) -> ComposeResult:
        """Create the board layout."""
        yield Header()
        with Container(id="board-container"):
            yield Horizontal(id="sections")
        yield Static("", id="drag-status")
        yield Footer()

    def on_mount(self) -> None:
        """Subscribe to board state and render what is already loaded."""
        options = self.app.config_service.get_config().board  # pyrefly: ignore[missing-attribute]
        self._sensor = PointerSensor(activation_constraint(options))
        self._unsubscribe = self.service.state.subscribe(self._on_state_change)
        self.call_after_refresh(self.render_board)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_state_change(self, _board: Board | None) -> None:
        self.call_after_refresh(self.render_board)

    async def render_board(self) -> None:
        """Rebuild the section columns from the current board state."""
        container = self.query_one("#sections", Horizontal)
        await container.remove_children()
        self._highlighted = None
        self._dragging = None

        board = self.board
        if board is None:
            self.sub_title = "loading…"
            return

        await container.mount_all([SectionColumn(section) for section in board.sections])
        self.sub_title = f"{board.project_id} · {len(board.sections)} sections · {board.task_count} tasks"
        self.call_after_refresh(self._restore_focus)
        self.call_after_refresh(self._update_drag_display)

    # --- Columns & focus ---

    @property
    def columns(self) -> list[SectionColumn]:
        return list(self.query(SectionColumn))

    def _get_column(self, index: int) -> SectionColumn | None:
        columns = self.columns
        if 0 <= index < len(columns):
            return columns[index]
        return None

    def _find_task_position(self, task_id: str) -> tuple[int, int] | None:
        for col_idx, column in enumerate(self.columns):
            for task_idx, card in enumerate(column.cards):
                if card.task.id == task_id:
                    return col_idx, task_idx
        return None

    def _restore_focus(self) -> None:
        """Keep focus on the same task across re-renders, else clamp position."""
        if self._focus_task_id:
            position = self._find_task_position(self._focus_task_id)
            if position:
                self._current_section, self._current_task = position
                self._update_focus()
                return

        count = len(self.columns)
        self._current_section = max(0, min(self._current_section, count - 1))
        column = self._get_column(self._current_section)
        if column and column.task_count > 0:
            self._current_task = min(self._current_task, column.task_count - 1)
        else:
            self._current_task = 0
        self._update_focus()

    def _update_focus(self) -> None:
        column = self._get_column(self._current_section)
        if column is None:
            return
        if not column.focus_task(self._current_task):
            return
        card = column.get_task_card(self._current_task)
        self._focus_task_id = card.task.id if card else None

    def navigate_section(self, delta: int) -> None:
        """Move focus between sections."""
        count = len(self.columns)
        new_section = max(0, min(self._current_section + delta, count - 1))
        if new_section == self._current_section:
            return
        self._current_section = new_section
        column = self._get_column(new_section)
        if column and column.task_count > 0:
            self._current_task = min(self._current_task, column.task_count - 1)
        else:
            self._current_task = 0
            self._focus_task_id = None
        self._update_focus()

    def navigate_task(self, delta: int) -> None:
        """Move focus between tasks in the current section."""
        column = self._get_column(self._current_section)
        if column is None or column.task_count == 0:
            return
        new_task = max(0, min(self._current_task + delta, column.task_count - 1))
        if new_task != self._current_task:
            self._current_task = new_task
            self._update_focus()

    def get_current_task(self) -> Task | None:
        """Get the currently focused task."""
        column = self._get_column(self._current_section)
        card = column.get_task_card(self._current_task) if column else None
        return card.task if card else None

    @property
    def current_section_id(self) -> str | None:
        column = self._get_column(self._current_section)
        return column.section.id if column else None

    # --- Keyboard drag ---

    def pick_up_task(self) -> bool:
        """Start a keyboard drag of the focused task."""
        column = self._get_column(self._current_section)
        card = column.get_task_card(self._current_task) if column else None
        if card is None or card.token is None:
            return False
        return self._begin_keyboard_drag(card.token)

    def pick_up_section(self) -> bool:
        """Start a keyboard drag of the current section."""
        section_id = self.current_section_id
        if section_id is None:
            return False
        return self._begin_keyboard_drag(encode_section(section_id))

    def _begin_keyboard_drag(self, token: str) -> bool:
        if self.is_dragging or not self.service.can_drag(token):
            self.notify("This item can't be moved right now", severity="warning")
            return False
        if self.service.start_drag(token) is None:
            return False
        self._keyboard_drag = True
        self._drop_token = token
        self.service.drag_over(token)
        self._update_drag_display()
        return True

    def move_drop_target(self, direction: Direction) -> None:
        """Step the drop target with the arrow keys."""
        subject = self.service.session.subject
        board = self.board
        if subject is None or board is None:
            return
        token = next_target(board, subject, self._drop_token, direction)
        if token is not None:
            self._drop_token = token
            self.service.drag_over(token)
            self._update_drag_display()

    def drop(self) -> None:
        """Drop the dragged item on the current target."""
        if not self.is_dragging:
            return
        subject = self.service.session.subject
        if subject is not None and isinstance(subject, TaskRef):
            self._focus_task_id = subject.task_id
        self.service.drop(self._drop_token)
        self._finish_drag()

    def cancel_drag(self) -> bool:
        """Abandon the active drag. Returns False if none was active."""
        if not self.is_dragging:
            return False
        self.service.cancel_drag()
        self._finish_drag()
        return True

    def _finish_drag(self) -> None:
        self._keyboard_drag = False
        self._drop_token = None
        self._update_drag_display()

    # --- Pointer drag ---

    def _draggable_at(self, x: int, y: int) -> str | None:
        for column in self.columns:
            token = column.draggable_at(x, y)
            if token is not None:
                return token
        return None

    def _droppable_at(self, x: int, y: int) -> str | None:
        section_drag = self.service.session.is_section_drag
        for column in self.columns:
            token = column.droppable_at(x, y, section_drag=section_drag)
            if token is not None:
                return token
        return None

    def on_mouse_down(self, event: events.MouseDown) -> None:
        if self._sensor is None or self.is_dragging:
            return
        token = self._draggable_at(event.screen_x, event.screen_y)
        if token is None or not self.service.can_drag(token):
            return
        self.capture_mouse()
        if self._sensor.press(token, event.screen_x, event.screen_y):
            self._begin_pointer_drag()
        elif self._sensor.constraint.delay > 0:
            self.set_timer(self._sensor.constraint.delay, self._check_hold)

    def _check_hold(self) -> None:
        if self._sensor is not None and self._sensor.tick():
            self._begin_pointer_drag()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self._sensor is None:
            return
        if self._sensor.pending:
            if self._sensor.move(event.screen_x, event.screen_y):
                self._begin_pointer_drag()
            return
        if self.is_dragging and not self._keyboard_drag:
            self._drop_token = self._droppable_at(event.screen_x, event.screen_y)
            self.service.drag_over(self._drop_token)
            self._update_drag_display()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self._sensor is None or self._sensor.token is None:
            return
        pressed = self._sensor.token
        clicked = self._sensor.release()
        self.release_mouse()

        if self.is_dragging and not self._keyboard_drag:
            self._drop_token = self._droppable_at(event.screen_x, event.screen_y)
            self.drop()
        elif clicked:
            self._on_click(pressed)

    def _begin_pointer_drag(self) -> None:
        token = self._sensor.token if self._sensor else None
        if token is None or self.service.start_drag(token) is None:
            return
        self._drop_token = None
        logger.debug("Pointer drag activated: %s", token)
        self._update_drag_display()

    def _on_click(self, token: str) -> None:
        """A press that never became a drag focuses the card."""
        for col_idx, column in enumerate(self.columns):
            for task_idx, card in enumerate(column.cards):
                if card.token == token:
                    self._current_section, self._current_task = col_idx, task_idx
                    self._update_focus()
                    return

    # --- Drag display ---

    def _widget_for(self, token: str | None) -> Widget | None:
        if token is None:
            return None
        for column in self.columns:
            widget = column.widget_for(token)
            if widget is not None:
                return widget
        return None

    def _update_drag_display(self) -> None:
        """Mark the dragged item and drop target, and describe the move."""
        session = self.service.session
        dragging = self._widget_for(self._subject_token())
        if self._dragging is not dragging:
            if self._dragging is not None:
                self._dragging.remove_class("dragging")
            if dragging is not None:
                dragging.add_class("dragging")
            self._dragging = dragging

        target = self._widget_for(self._drop_token) if session.is_active else None
        if self._highlighted is not target:
            if self._highlighted is not None:
                self._highlighted.remove_class("drop-target")
            if target is not None:
                target.add_class("drop-target")
            self._highlighted = target

        status = self.query_one("#drag-status", Static)
        if session.is_active:
            where = self._drop_token or "nowhere"
            status.update(f"[b]Moving[/] {self._describe_subject()} → [dim]{where}[/]  (Enter drop · Esc cancel)")
            status.display = True
        else:
            status.update("")
            status.display = False

    def _subject_token(self) -> str | None:
        subject = self.service.session.subject
        if subject is None:
            return None
        if isinstance(subject, TaskRef):
            for column in self.columns:
                for card in column.cards:
                    if card.task.id == subject.task_id:
                        return card.token
            return None
        return encode_section(subject.section_id)

    def _describe_subject(self) -> str:
        subject = self.service.session.subject
        board = self.board
        if subject is None or board is None:
            return ""
        if isinstance(subject, TaskRef):
            task = board.get_task(subject.task_id)
            return f"task '{task.display_title}'" if task else "task"
        section = board.get_section(subject.section_id)
        return f"section '{section.name}'" if section else "section"

