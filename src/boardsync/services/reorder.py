"""Reorder engine.

Pure functions that compute the next board from the current board and a
(subject, target) pair. The input board is never mutated; a fresh copy is
returned whenever anything moves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models import Board, Section
from ..models.drag_ref import ContainerRef, PlaceholderRef, SectionRef, TaskRef

logger = logging.getLogger(__name__)

DragTarget = SectionRef | TaskRef | PlaceholderRef | ContainerRef


class StaleSubjectError(Exception):
    """The dragged item is no longer on the board."""

    pass


@dataclass(frozen=True)
class SectionMove:
    """Section reorder to persist: the new order of every section."""

    section_id: str
    orders: tuple[tuple[str, int], ...]  # (section_id, order) for all sections


@dataclass(frozen=True)
class TaskMove:
    """Task move to persist."""

    task_id: str
    section_id: str  # Destination section
    index: int  # Final position within the destination section
    from_section_id: str

    @property
    def is_cross_section(self) -> bool:
        return self.section_id != self.from_section_id


@dataclass(frozen=True)
class ReorderResult:
    """Next board plus the move that produced it (None for a no-op)."""

    board: Board
    move: SectionMove | TaskMove | None = None

    @property
    def is_noop(self) -> bool:
        return self.move is None


def renumber_sections(board: Board) -> None:
    """Assign dense section orders 0..n-1 in list order (in place)."""
    for idx, section in enumerate(board.sections):
        section.order = idx


def renumber_tasks(section: Section) -> None:
    """Assign dense task orders 0..m-1 in list order (in place)."""
    for idx, task in enumerate(section.tasks):
        task.order = idx


def resolve_task_target(board: Board, target: DragTarget) -> tuple[str, int | None] | None:
    """Resolve where a dropped task should land.

    Returns:
        (section_id, index) where index None means "append at the end", or
        None when the target section is not on the board.
    """
    if board.get_section(target.section_id) is None:
        return None
    if isinstance(target, TaskRef):
        return target.section_id, target.index
    if isinstance(target, PlaceholderRef):
        return target.section_id, 0
    # Section header or container: append
    return target.section_id, None


def plan_reorder(
    board: Board,
    subject: SectionRef | TaskRef,
    target: DragTarget,
) -> ReorderResult:
    """Compute the board after dropping subject on target.

    Raises:
        StaleSubjectError: The subject no longer exists on the board.
    """
    if isinstance(subject, SectionRef):
        return _reorder_section(board, subject, target)
    return _reorder_task(board, subject, target)


def reorder(board: Board, subject: SectionRef | TaskRef, target: DragTarget) -> Board:
    """Return the board after dropping subject on target."""
    return plan_reorder(board, subject, target).board


def _reorder_section(board: Board, subject: SectionRef, target: DragTarget) -> ReorderResult:
    source_idx = board.section_index(subject.section_id)
    if source_idx < 0:
        raise StaleSubjectError(f"Section no longer on board: {subject.section_id}")

    target_idx = board.section_index(target.section_id)
    if target_idx < 0:
        logger.debug("Section drop target not on board: %s", target.section_id)
        return ReorderResult(board)
    if source_idx == target_idx:
        return ReorderResult(board)

    new_board = board.model_copy(deep=True)
    moved = new_board.sections.pop(source_idx)
    new_board.sections.insert(target_idx, moved)
    renumber_sections(new_board)

    logger.debug("Section %s moved %d -> %d", subject.section_id, source_idx, target_idx)
    return ReorderResult(
        new_board,
        SectionMove(
            section_id=subject.section_id,
            orders=tuple((s.id, s.order) for s in new_board.sections),
        ),
    )


def _reorder_task(board: Board, subject: TaskRef, target: DragTarget) -> ReorderResult:
    source = board.get_section(subject.section_id)
    source_idx = source.index_of(subject.task_id) if source else -1
    if source is None or source_idx < 0:
        # The task may have moved since its token was issued
        found = board.find_task(subject.task_id)
        if found is None:
            raise StaleSubjectError(f"Task no longer on board: {subject.task_id}")
        source, source_idx = found

    resolved = resolve_task_target(board, target)
    if resolved is None:
        logger.debug("Task drop target not on board: %s", target.section_id)
        return ReorderResult(board)
    target_section_id, target_idx = resolved

    new_board = board.model_copy(deep=True)
    new_source = new_board.sections[board.section_index(source.id)]
    new_target = new_board.sections[board.section_index(target_section_id)]

    task = new_source.tasks.pop(source_idx)
    if target_idx is None or target_idx > len(new_target.tasks):
        target_idx = len(new_target.tasks)

    if new_source is new_target and target_idx == source_idx:
        return ReorderResult(board)

    task.section_id = new_target.id
    new_target.tasks.insert(target_idx, task)
    renumber_tasks(new_target)
    if new_source is not new_target:
        renumber_tasks(new_source)

    logger.debug(
        "Task %s moved %s[%d] -> %s[%d]",
        subject.task_id,
        source.id,
        source_idx,
        new_target.id,
        target_idx,
    )
    return ReorderResult(
        new_board,
        TaskMove(
            task_id=subject.task_id,
            section_id=new_target.id,
            index=target_idx,
            from_section_id=source.id,
        ),
    )
