"""Keyboard drop-target navigation.

While a drag is active, arrow keys step the drop target across the board:
up/down within a section, left/right to the neighbouring section.
"""

from __future__ import annotations

from typing import Literal

from ..models import Board, Section
from ..models.drag_ref import SectionRef, TaskRef
from .identifiers import (
    encode_container,
    encode_placeholder,
    encode_section,
    task_tokens,
    try_decode,
)

Direction = Literal["up", "down", "left", "right"]


def section_targets(section: Section) -> list[str]:
    """Drop targets of a section in top-to-bottom order, for task drags.

    A populated section offers its task cards followed by the container
    (append). An empty section offers its placeholder.
    """
    tokens = list(task_tokens(section))
    if not section.tasks:
        return [encode_placeholder(section.id)]
    tokens.append(encode_container(section.id))
    return tokens


def _locate(board: Board, token: str) -> tuple[int, int] | None:
    """Find (section index, target index) of a token in the keyboard grid."""
    ref = try_decode(token)
    if ref is None:
        return None
    section_idx = board.section_index(ref.section_id)
    if section_idx < 0:
        return None
    targets = section_targets(board.sections[section_idx])
    if token in targets:
        return section_idx, targets.index(token)
    if isinstance(ref, TaskRef):
        # Stale index; fall back to the task's current slot
        for idx, candidate in enumerate(targets):
            found = try_decode(candidate)
            if isinstance(found, TaskRef) and found.task_id == ref.task_id:
                return section_idx, idx
    return section_idx, 0


def next_target(
    board: Board,
    subject: SectionRef | TaskRef,
    current: str | None,
    direction: Direction,
) -> str | None:
    """Step the drop target one position in a direction.

    Args:
        board: Current board state
        subject: The item being dragged
        current: Token of the current target, or None to start at the subject
        direction: Arrow key pressed

    Returns:
        Token of the new target, or the current one at a boundary.
    """
    if not board.sections:
        return None

    if isinstance(subject, SectionRef):
        start = current or encode_section(subject.section_id)
        ref = try_decode(start)
        idx = board.section_index(ref.section_id) if ref else -1
        if idx < 0:
            idx = max(0, board.section_index(subject.section_id))
        if direction == "left":
            idx = max(0, idx - 1)
        elif direction == "right":
            idx = min(len(board.sections) - 1, idx + 1)
        return encode_section(board.sections[idx].id)

    position = _locate(board, current) if current else None
    if position is None:
        position = _locate(board, encode_container(subject.section_id))
        found = board.find_task(subject.task_id)
        if found is not None:
            section, task_idx = found
            position = (board.section_index(section.id), _slot_of_task(section, task_idx))
    if position is None:
        return None

    section_idx, slot = position
    if direction == "up":
        slot = max(0, slot - 1)
    elif direction == "down":
        slot = min(len(section_targets(board.sections[section_idx])) - 1, slot + 1)
    elif direction == "left":
        section_idx = max(0, section_idx - 1)
    elif direction == "right":
        section_idx = min(len(board.sections) - 1, section_idx + 1)

    targets = section_targets(board.sections[section_idx])
    return targets[min(slot, len(targets) - 1)]


def _slot_of_task(section: Section, task_idx: int) -> int:
    """Map a task index to its slot among draggable targets."""
    return sum(1 for t in section.tasks[:task_idx] if t.id)
