"""Pointer activation constraints.

A press only becomes a drag once the pointer has travelled far enough
(mouse) or has been held long enough without wandering (touch). Anything
short of that is a click.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class ActivationConstraint:
    """Thresholds that turn a press into a drag.

    Attributes:
        distance: Cells the pointer must travel before activating (0 = immediate).
        delay: Seconds the press must be held before activating (0 = no delay).
        tolerance: With a delay, movement beyond this many cells aborts the press.
    """

    distance: int = 0
    delay: float = 0.0
    tolerance: int = 0

    @classmethod
    def mouse(cls, distance: int = 2) -> ActivationConstraint:
        """Distance-based constraint for mouse input."""
        return cls(distance=distance)

    @classmethod
    def touch(cls, delay: float = 0.08, tolerance: int = 6) -> ActivationConstraint:
        """Press-and-hold constraint for touch input."""
        return cls(delay=delay, tolerance=tolerance)


@dataclass
class _Press:
    token: str
    x: int
    y: int
    started: float


class PointerSensor:
    """Arbitrates between click and drag for one pointer."""

    def __init__(
        self,
        constraint: ActivationConstraint,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.constraint = constraint
        self._clock = clock
        self._press: _Press | None = None
        self._activated = False

    @property
    def pending(self) -> bool:
        """Whether a press is being tracked but has not activated."""
        return self._press is not None and not self._activated

    @property
    def activated(self) -> bool:
        """Whether the current press became a drag."""
        return self._activated

    @property
    def token(self) -> str | None:
        """Token under the pointer when the press started."""
        return self._press.token if self._press else None

    def press(self, token: str, x: int, y: int) -> bool:
        """Begin tracking a press.

        Returns:
            True if the constraint is satisfied immediately.
        """
        self._press = _Press(token, x, y, self._clock())
        self._activated = self.constraint.distance <= 0 and self.constraint.delay <= 0
        return self._activated

    def move(self, x: int, y: int) -> bool:
        """Report pointer movement.

        Returns:
            True exactly once, on the move that activates the drag.
        """
        if self._press is None or self._activated:
            return False

        travelled = math.hypot(x - self._press.x, y - self._press.y)
        constraint = self.constraint

        if constraint.delay > 0:
            if travelled > constraint.tolerance:
                # Wandered off before the hold completed
                self._press = None
                return False
            if self._clock() - self._press.started >= constraint.delay:
                self._activated = True
                return True
            return False

        if travelled >= constraint.distance:
            self._activated = True
            return True
        return False

    def tick(self) -> bool:
        """Check a stationary press against the hold delay.

        Returns:
            True exactly once, when the hold completes.
        """
        if self._press is None or self._activated or self.constraint.delay <= 0:
            return False
        if self._clock() - self._press.started >= self.constraint.delay:
            self._activated = True
            return True
        return False

    def release(self) -> bool:
        """End the press.

        Returns:
            True if the press ended as a click (never activated).
        """
        was_click = self._press is not None and not self._activated
        self._press = None
        self._activated = False
        return was_click
