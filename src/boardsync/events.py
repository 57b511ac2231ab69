"""Board change notifications.

CRUD flows elsewhere in the application emit events on a shared hub; the
board service subscribes and refreshes. The hub is passed in explicitly
rather than living in a global.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class BoardEvent(str, Enum):
    """Events that invalidate the board."""

    TASK_UPDATED = "task_updated"  # Task created, edited or deleted
    SECTION_UPDATED = "section_updated"  # Section created, renamed or deleted


class BoardEvents:
    """Observer hub for board events."""

    def __init__(self) -> None:
        self._listeners: dict[BoardEvent, list[Listener]] = defaultdict(list)

    def subscribe(self, event: BoardEvent, listener: Listener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            A callable that removes the listener.
        """
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners[event]
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def emit(self, event: BoardEvent, **payload: Any) -> int:
        """Notify listeners of an event.

        Returns:
            Number of listeners notified.
        """
        listeners = list(self._listeners[event])
        logger.debug("Event %s -> %d listeners %s", event.value, len(listeners), payload)
        for listener in listeners:
            listener(event, **payload)
        return len(listeners)

    def listener_count(self, event: BoardEvent) -> int:
        return len(self._listeners[event])
