"""Service for board state management and drag interactions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from ..drag import DragSessionController, subject_key
from ..drag.session import DragTarget, SubjectKey
from ..events import BoardEvent, BoardEvents
from ..gateways import GatewayError, GatewayProtocol
from ..models import Board, SectionRef, Task, TaskRef
from .board_state import BoardState
from .reconciler import PersistResult, Reconciler

logger = logging.getLogger(__name__)

Notifier = Callable[..., Any]


class BoardService:
    """The board component's engine.

    Owns board state, one drag session and the bookkeeping of in-flight
    persistence. Exposes click callbacks (edit/delete/add) and ``refresh()``
    for CRUD flows outside the board.
    """

    def __init__(
        self,
        gateway: GatewayProtocol,
        project_id: str,
        events: BoardEvents | None = None,
        *,
        can_manage_sections: bool = True,
        on_edit_task: Callable[[Task], Any] | None = None,
        on_delete_task: Callable[[str], Any] | None = None,
        on_add_task: Callable[[str], Any] | None = None,
        notify: Notifier | None = None,
    ) -> None:
        self.gateway = gateway
        self.project_id = project_id
        self.events = events
        self.state = BoardState()
        self.reconciler = Reconciler(self.state, gateway, project_id)
        self._in_flight: dict[SubjectKey, asyncio.Task[PersistResult]] = {}
        self._refreshes: set[asyncio.Task[Board | None]] = set()
        self.session = DragSessionController(
            can_drag_sections=can_manage_sections,
            is_locked=self.is_in_flight,
        )
        self.on_edit_task = on_edit_task
        self.on_delete_task = on_delete_task
        self.on_add_task = on_add_task
        self._notify = notify
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def board(self) -> Board | None:
        """The current board, or None before mount."""
        return self.state.board

    # --- Lifecycle ---

    async def mount(self) -> Board | None:
        """Subscribe to board events and load the board."""
        if self.events is not None and not self._unsubscribers:
            for event in (BoardEvent.TASK_UPDATED, BoardEvent.SECTION_UPDATED):
                self._unsubscribers.append(self.events.subscribe(event, self._on_board_event))
        logger.info("Mounting board for project %s", self.project_id)
        return await self.refresh()

    def unmount(self) -> None:
        """Drop subscriptions, the active drag and the board state."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.session.cancel()
        self.state.clear()
        logger.info("Board unmounted for project %s", self.project_id)

    async def refresh(self) -> Board | None:
        """Reload the board from the gateway.

        Returns:
            The new board, or None if the fetch failed (state is kept).
        """
        try:
            return await self.reconciler.reload()
        except GatewayError as e:
            logger.error("Board refresh failed: %s", e)
            self._send(f"Failed to load board: {e}", severity="error")
            return None

    def _on_board_event(self, event: BoardEvent, **payload: Any) -> None:
        logger.debug("Refreshing on %s %s", event.value, payload)
        task = asyncio.get_running_loop().create_task(self.refresh())
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)

    # --- Drag interactions ---

    @property
    def busy(self) -> bool:
        """Whether a drag is active or a move is still being persisted."""
        return self.session.is_active or bool(self._in_flight)

    def is_in_flight(self, key: SubjectKey) -> bool:
        """Whether a move of this subject is still being persisted.

        A section reorder rewrites every section's order, so any section
        move in flight locks all sections.
        """
        if key[0] == "section":
            return any(kind == "section" for kind, _ in self._in_flight)
        return key in self._in_flight

    def can_drag(self, token: str) -> bool:
        """Whether the item behind a token may be picked up."""
        return self.board is not None and self.session.is_draggable(token)

    def start_drag(self, token: str) -> SectionRef | TaskRef | None:
        """Pick up a section or task."""
        if self.board is None:
            return None
        subject = self.session.start(token)
        if subject is not None:
            logger.info("Drag started: %s", token)
        return subject

    def drag_over(self, token: str | None) -> DragTarget | None:
        """Track the droppable under the pointer."""
        return self.session.over(token)

    def cancel_drag(self) -> None:
        """Abandon the active drag (Escape)."""
        self.session.cancel()

    def drop(self, token: str | None = None) -> asyncio.Task[PersistResult] | None:
        """Drop the dragged item and start persisting the move.

        The board is updated before this returns. Persistence runs in the
        background; the returned task resolves with its outcome.

        Returns:
            The persistence task, or None when nothing needs persisting.
        """
        result = self.session.end(token)
        board = self.board
        if result is None or board is None:
            return None

        commit = self.reconciler.commit(board, result.subject, result.target)
        if commit.is_noop:
            return None

        key = subject_key(result.subject)
        task = asyncio.get_running_loop().create_task(self._persist(key, commit.persist))
        self._in_flight[key] = task
        logger.info("Drop committed: %s -> %s", result.subject, result.target)
        return task

    async def move(self, source: str, target: str) -> PersistResult | None:
        """Drag source onto target in one step and wait for persistence."""
        if self.start_drag(source) is None:
            return None
        task = self.drop(target)
        if task is None:
            return None
        return await task

    async def wait_idle(self) -> None:
        """Wait for in-flight persistence and pending refreshes."""
        pending = [*self._in_flight.values(), *self._refreshes]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _persist(self, key: SubjectKey, persist: Callable[[], Any]) -> PersistResult:
        try:
            outcome: PersistResult = await persist()
        except Exception as e:
            # Nothing awaits this task, so unexpected errors stop here
            logger.exception("Unexpected error persisting %s", key)
            self._in_flight.pop(key, None)
            reloaded = await self.refresh() is not None
            outcome = PersistResult(ok=False, error=str(e) or type(e).__name__, reloaded=reloaded)
        finally:
            self._in_flight.pop(key, None)
        if not outcome.ok:
            action = "reorder sections" if key[0] == "section" else "move task"
            self._send(f"Failed to {action}: {outcome.error}", severity="error")
        return outcome

    # --- Click callbacks ---

    def edit_task(self, task_id: str) -> bool:
        """Fire on_edit_task for a task on the board."""
        task = self.board.get_task(task_id) if self.board else None
        if task is None or self.on_edit_task is None:
            return False
        self.on_edit_task(task)
        return True

    def delete_task(self, task_id: str) -> bool:
        """Fire on_delete_task for a task on the board."""
        if self.board is None or self.board.get_task(task_id) is None:
            return False
        if self.on_delete_task is None:
            return False
        self.on_delete_task(task_id)
        return True

    def add_task(self, section_id: str) -> bool:
        """Fire on_add_task for a section on the board."""
        if self.board is None or self.board.get_section(section_id) is None:
            return False
        if self.on_add_task is None:
            return False
        self.on_add_task(section_id)
        return True

    def _send(self, message: str, severity: str = "information") -> None:
        if self._notify is not None:
            self._notify(message, severity=severity)
