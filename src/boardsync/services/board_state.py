"""In-memory board state holder."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..models import Board

logger = logging.getLogger(__name__)

StateListener = Callable[[Board | None], None]


class BoardState:
    """Single source of truth for the rendered board.

    Replaced wholesale, never patched. Render code subscribes to changes and
    reads ``board``; only the reconciler calls ``replace``.
    """

    def __init__(self) -> None:
        self._board: Board | None = None
        self._version = 0
        self._listeners: list[StateListener] = []

    @property
    def board(self) -> Board | None:
        return self._board

    @property
    def version(self) -> int:
        """Incremented on every replacement."""
        return self._version

    @property
    def loaded(self) -> bool:
        return self._board is not None

    def replace(self, board: Board | None, reason: str = "") -> None:
        """Swap in a new board and notify listeners."""
        self._board = board
        self._version += 1
        logger.debug("Board state replaced (v%d, %s)", self._version, reason or "unspecified")
        for listener in list(self._listeners):
            listener(board)

    def clear(self) -> None:
        """Discard the board (unmount or project switch)."""
        self.replace(None, reason="cleared")

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
