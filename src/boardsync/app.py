"""boardsync TUI Application."""

import logging

from textual.app import App
from textual.binding import Binding
from textual.screen import ModalScreen

from .config import Settings
from .events import BoardEvents
from .gateways import GatewayProtocol
from .gateways.factory import create_gateway, resolve_project_id
from .models import Task
from .services import BoardService, ConfigService
from .ui.screens.board import BoardScreen
from .ui.widgets import TaskDetailModal

logger = logging.getLogger(__name__)


class BoardSyncApp(App):
    """boardsync - Terminal kanban board."""

    TITLE = "boardsync"

    CSS_PATH = "ui/styles.tcss"

    BINDINGS = [
        # Core bindings
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "refresh", "Refresh", show=True),
        # Navigation (or drop-target movement while dragging)
        Binding("h", "nav_left", "← Section", show=False),
        Binding("j", "nav_down", "↓ Task", show=False),
        Binding("k", "nav_up", "↑ Task", show=False),
        Binding("l", "nav_right", "→ Section", show=False),
        Binding("left", "nav_left", "← Section", show=False),
        Binding("down", "nav_down", "↓ Task", show=False),
        Binding("up", "nav_up", "↑ Task", show=False),
        Binding("right", "nav_right", "→ Section", show=False),
        # Keyboard drag
        Binding("m", "pick_up_task", "Move", show=True),
        Binding("space", "pick_up_task", "Move", show=False),
        Binding("M", "pick_up_section", "Move section", show=True),
        Binding("enter", "select", "Drop/Open", show=False),
        # Task actions
        Binding("n", "new_task", "New", show=True),
        Binding("e", "edit_task", "Open", show=True),
        Binding("d", "delete_task", "Delete", show=False),
        Binding("escape", "escape", "Cancel", show=False, priority=True),
    ]

    def __init__(self, settings: Settings | None = None, gateway: GatewayProtocol | None = None) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self._init_services(gateway)

    def _init_services(self, gateway: GatewayProtocol | None) -> None:
        """Initialize gateway, event hub and board service."""
        self.config_service = ConfigService(self.settings.project_root)
        config = self.config_service.get_config()

        self.gateway = gateway or create_gateway(self.settings, self.config_service)
        self.events = BoardEvents()
        self.board_service = BoardService(
            self.gateway,
            resolve_project_id(self.settings, self.config_service),
            self.events,
            can_manage_sections=config.board.can_manage_sections,
            on_edit_task=self._open_task,
            on_delete_task=self._request_delete,
            on_add_task=self._request_add,
            notify=self.notify,
        )

    async def on_mount(self) -> None:
        """Called when app is mounted."""
        if self.config_service.has_config_error:
            self.notify(f"Config error: {self.config_service.config_error}", severity="warning")

        self.push_screen(BoardScreen())
        await self.board_service.mount()

        poll_interval = self.config_service.get_config().board.poll_interval
        if poll_interval > 0:
            self.set_interval(poll_interval, self._poll)

    async def on_unmount(self) -> None:
        self.board_service.unmount()
        await self.gateway.close()

    async def _poll(self) -> None:
        """Background refresh, skipped while a move is in progress."""
        if self.board_service.busy:
            logger.debug("Poll skipped, board busy")
            return
        await self.board_service.refresh()

    async def action_refresh(self) -> None:
        """Reload the board from the gateway."""
        if await self.board_service.refresh() is not None:
            self.notify("Board refreshed", timeout=2)

    def _board_screen(self) -> BoardScreen | None:
        screen = self.screen
        return screen if isinstance(screen, BoardScreen) else None

    # Navigation actions
    def _nav(self, direction: str, delta: int, across: bool) -> None:
        screen = self._board_screen()
        if screen is None:
            return
        if screen.is_dragging:
            screen.move_drop_target(direction)  # pyrefly: ignore[bad-argument-type]
        elif across:
            screen.navigate_section(delta)
        else:
            screen.navigate_task(delta)

    def action_nav_left(self) -> None:
        """Previous section, or move the drop target left."""
        self._nav("left", -1, across=True)

    def action_nav_right(self) -> None:
        """Next section, or move the drop target right."""
        self._nav("right", 1, across=True)

    def action_nav_up(self) -> None:
        """Previous task, or move the drop target up."""
        self._nav("up", -1, across=False)

    def action_nav_down(self) -> None:
        """Next task, or move the drop target down."""
        self._nav("down", 1, across=False)

    # Drag actions
    def action_pick_up_task(self) -> None:
        """Pick up the focused task for a keyboard move."""
        screen = self._board_screen()
        if screen is not None and not screen.is_dragging:
            screen.pick_up_task()

    def action_pick_up_section(self) -> None:
        """Pick up the current section for a keyboard move."""
        screen = self._board_screen()
        if screen is None or screen.is_dragging:
            return
        if not self.board_service.session.can_drag_sections:
            self.notify("You don't have permission to reorder sections", severity="warning")
            return
        screen.pick_up_section()

    def action_select(self) -> None:
        """Drop while dragging, otherwise open the focused task."""
        screen = self._board_screen()
        if screen is None:
            return
        if screen.is_dragging:
            screen.drop()
        else:
            self.action_edit_task()

    def action_escape(self) -> None:
        """Dismiss a modal or cancel the active drag."""
        screen = self.screen
        if isinstance(screen, ModalScreen):
            screen.dismiss()
            return
        if isinstance(screen, BoardScreen):
            screen.cancel_drag()

    # Task actions (fired through the board's callbacks)
    def action_edit_task(self) -> None:
        """Open the focused task."""
        screen = self._board_screen()
        task = screen.get_current_task() if screen else None
        if task is not None and task.id:
            self.board_service.edit_task(task.id)

    def action_delete_task(self) -> None:
        """Request deletion of the focused task."""
        screen = self._board_screen()
        task = screen.get_current_task() if screen else None
        if task is not None and task.id:
            self.board_service.delete_task(task.id)

    def action_new_task(self) -> None:
        """Request a new task in the current section."""
        screen = self._board_screen()
        section_id = screen.current_section_id if screen else None
        if section_id is not None:
            self.board_service.add_task(section_id)

    def _open_task(self, task: Task) -> None:
        self.push_screen(TaskDetailModal(task))

    def _request_delete(self, task_id: str) -> None:
        # Task CRUD lives in the board server's own client
        logger.info("Delete requested for task %s", task_id)
        self.notify("Delete tasks from the board server, then press r to refresh", severity="warning")

    def _request_add(self, section_id: str) -> None:
        logger.info("New task requested in section %s", section_id)
        self.notify("Create tasks from the board server, then press r to refresh", severity="warning")


def run(settings: Settings | None = None) -> None:
    """Run the boardsync application."""
    app = BoardSyncApp(settings)
    app.run()
