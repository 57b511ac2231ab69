"""Drag session state machine."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..models.drag_ref import ContainerRef, PlaceholderRef, SectionRef, TaskRef
from .identifiers import try_decode

logger = logging.getLogger(__name__)

DragTarget = SectionRef | TaskRef | PlaceholderRef | ContainerRef
SubjectKey = tuple[str, str]


class DragState(str, Enum):
    """Lifecycle of a drag session."""

    IDLE = "idle"  # Nothing picked up
    ACTIVE = "active"  # Subject picked up, tracking the pointer
    RESOLVED = "resolved"  # Dropped on a valid target


@dataclass(frozen=True)
class DropResult:
    """Subject and target handed to the reorder engine on drop."""

    subject: SectionRef | TaskRef
    target: DragTarget


def subject_key(subject: SectionRef | TaskRef) -> SubjectKey:
    """Key identifying the dragged item independent of its position."""
    if isinstance(subject, SectionRef):
        return ("section", subject.section_id)
    return ("task", subject.task_id)


class DragSessionController:
    """Owns the lifecycle of one drag at a time.

    The controller only classifies tokens and tracks the drop target; it
    never touches board state. Cancelling, or dropping outside any valid
    target, returns to IDLE with nothing handed on.
    """

    def __init__(
        self,
        can_drag_sections: bool = True,
        is_locked: Callable[[SubjectKey], bool] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            can_drag_sections: Whether section reordering is permitted
            is_locked: Returns True for subjects whose previous move is still
                being persisted
        """
        self.can_drag_sections = can_drag_sections
        self._is_locked = is_locked or (lambda _key: False)
        self._state = DragState.IDLE
        self._subject: SectionRef | TaskRef | None = None
        self._over: DragTarget | None = None
        self._result: DropResult | None = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def subject(self) -> SectionRef | TaskRef | None:
        """The item being dragged, if a session is active."""
        return self._subject

    @property
    def over_target(self) -> DragTarget | None:
        """The target currently under the pointer."""
        return self._over

    @property
    def result(self) -> DropResult | None:
        """The outcome of the last resolved session."""
        return self._result

    @property
    def is_active(self) -> bool:
        return self._state is DragState.ACTIVE

    @property
    def is_section_drag(self) -> bool:
        """Whether a whole section is being dragged."""
        return self.is_active and isinstance(self._subject, SectionRef)

    def is_draggable(self, token: str) -> bool:
        """Check whether the item behind a token may be picked up right now."""
        ref = try_decode(token)
        if not isinstance(ref, (SectionRef, TaskRef)):
            return False
        if isinstance(ref, SectionRef) and not self.can_drag_sections:
            return False
        # A section carries its tasks with it
        if isinstance(ref, TaskRef) and self.is_section_drag:
            return False
        return not self._is_locked(subject_key(ref))

    def start(self, token: str) -> SectionRef | TaskRef | None:
        """Pick up the item behind a token.

        Returns:
            The drag subject, or None if the token cannot be dragged.
        """
        if self._state is DragState.ACTIVE:
            logger.debug("Drag start ignored, session already active: %s", token)
            return None

        ref = try_decode(token)
        if not isinstance(ref, (SectionRef, TaskRef)):
            logger.debug("Drag start ignored, not a draggable token: %s", token)
            return None
        if isinstance(ref, SectionRef) and not self.can_drag_sections:
            logger.debug("Drag start refused, sections cannot be managed: %s", token)
            return None
        if self._is_locked(subject_key(ref)):
            logger.debug("Drag start refused, move still in flight: %s", token)
            return None

        self._state = DragState.ACTIVE
        self._subject = ref
        self._over = None
        self._result = None
        logger.debug("Drag started: %s", ref)
        return ref

    def over(self, token: str | None) -> DragTarget | None:
        """Track the droppable currently under the pointer.

        Args:
            token: Token of the innermost droppable containing the pointer, or
                None when the pointer is outside every drop surface.
        """
        if self._state is not DragState.ACTIVE:
            return None
        self._over = try_decode(token)
        return self._over

    def end(self, token: str | None = None) -> DropResult | None:
        """Drop the subject.

        Args:
            token: Drop target token. Falls back to the tracked over-target.

        Returns:
            The drop result, or None when dropped outside any valid target.
        """
        if self._state is not DragState.ACTIVE or self._subject is None:
            return None

        target = try_decode(token) if token is not None else self._over
        if target is None:
            logger.debug("Drop outside any target, cancelling: %s", self._subject)
            self._reset()
            return None

        self._result = DropResult(subject=self._subject, target=target)
        self._state = DragState.RESOLVED
        self._subject = None
        self._over = None
        logger.debug("Drag resolved: %s -> %s", self._result.subject, target)
        return self._result

    def cancel(self) -> None:
        """Abandon the active session without side effects."""
        if self._state is DragState.ACTIVE:
            logger.debug("Drag cancelled: %s", self._subject)
        self._reset()

    def _reset(self) -> None:
        self._state = DragState.IDLE
        self._subject = None
        self._over = None
