"""Optimistic commit and rollback of board moves."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..gateways import GatewayError, GatewayProtocol
from ..models import Board
from ..models.drag_ref import ContainerRef, PlaceholderRef, SectionRef, TaskRef
from .board_state import BoardState
from .reorder import SectionMove, StaleSubjectError, TaskMove, plan_reorder

logger = logging.getLogger(__name__)

DragTarget = SectionRef | TaskRef | PlaceholderRef | ContainerRef


@dataclass(frozen=True)
class PersistResult:
    """Outcome of persisting a committed move."""

    ok: bool
    error: str | None = None
    reloaded: bool = False  # Whether state was reloaded from the gateway


@dataclass(frozen=True)
class CommitResult:
    """A committed move and the coroutine that persists it."""

    applied_board: Board
    move: SectionMove | TaskMove | None
    persist: Callable[[], Awaitable[PersistResult]]
    stale: bool = False

    @property
    def is_noop(self) -> bool:
        """Nothing moved and nothing needs persisting."""
        return self.move is None and not self.stale


async def _nothing_to_persist() -> PersistResult:
    return PersistResult(ok=True)


class Reconciler:
    """Applies moves optimistically and reconciles with the gateway.

    Sequence for every drop:
    1. compute the next board with the reorder engine
    2. replace board state immediately
    3. persist through the gateway (awaited by the caller)
    4. on success leave state as-is
    5. on failure reload the whole board from the gateway

    Reload is the only recovery path; nothing is patched back.
    """

    def __init__(self, state: BoardState, gateway: GatewayProtocol, project_id: str) -> None:
        self.state = state
        self.gateway = gateway
        self.project_id = project_id

    def commit(
        self,
        board: Board,
        subject: SectionRef | TaskRef,
        target: DragTarget,
    ) -> CommitResult:
        """Apply a drop to board state and return its persistence step.

        A stale subject aborts the commit; its persistence step reloads the
        board instead of writing anything.
        """
        try:
            result = plan_reorder(board, subject, target)
        except StaleSubjectError as e:
            logger.warning("Commit aborted, stale subject: %s", e)
            message = str(e)
            return CommitResult(
                applied_board=board,
                move=None,
                persist=lambda: self._reload_after_stale(message),
                stale=True,
            )

        if result.move is None:
            logger.debug("Drop is a no-op: %s -> %s", subject, target)
            return CommitResult(applied_board=board, move=None, persist=_nothing_to_persist)

        self.state.replace(result.board, reason="optimistic move")
        move = result.move
        return CommitResult(
            applied_board=result.board,
            move=move,
            persist=lambda: self._persist(move),
        )

    async def reload(self) -> Board:
        """Replace board state with the gateway's authoritative board.

        Raises:
            GatewayError: The board could not be fetched; state is untouched.
        """
        board = await self.gateway.fetch_board(self.project_id)
        self.state.replace(board, reason="reload")
        logger.info(
            "Board reloaded: %d sections, %d tasks", len(board.sections), board.task_count
        )
        return board

    async def _persist(self, move: SectionMove | TaskMove) -> PersistResult:
        try:
            if isinstance(move, SectionMove):
                await self._persist_sections(move)
            else:
                await self.gateway.move_task(
                    move.task_id, move.section_id, move.index, self.project_id
                )
        except GatewayError as e:
            logger.error("Persisting %s failed: %s", _describe(move), e)
            reloaded = await self._try_reload()
            return PersistResult(ok=False, error=str(e), reloaded=reloaded)

        logger.info("Persisted %s", _describe(move))
        return PersistResult(ok=True)

    async def _persist_sections(self, move: SectionMove) -> None:
        """Write every section's order concurrently."""
        results = await asyncio.gather(
            *(self.gateway.reorder_section(sid, order) for sid, order in move.orders),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, GatewayError):
                raise result
        for result in results:
            if isinstance(result, BaseException):
                raise result

    async def _reload_after_stale(self, reason: str) -> PersistResult:
        reloaded = await self._try_reload()
        return PersistResult(ok=False, error=reason, reloaded=reloaded)

    async def _try_reload(self) -> bool:
        try:
            await self.reload()
        except GatewayError as e:
            logger.error("Reload failed, keeping current board: %s", e)
            return False
        return True


def _describe(move: SectionMove | TaskMove) -> str:
    if isinstance(move, SectionMove):
        return f"section {move.section_id} reorder ({len(move.orders)} sections)"
    return f"task {move.task_id} -> {move.section_id}[{move.index}]"
