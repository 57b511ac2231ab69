"""Persistence gateway protocol."""

from typing import Protocol

from ..models import Board


class GatewayProtocol(Protocol):
    """Interface to the authoritative board store.

    Implementations:
    - HTTP (the board REST API)
    - Filesystem (a local YAML store)

    Every method raises ``GatewayError`` (or a subclass) on failure.
    Writes are idempotent given the same arguments.
    """

    async def fetch_board(self, project_id: str) -> Board:
        """Read the full board.

        Returns:
            Sections in order, each holding its tasks in order.
        """
        ...

    async def reorder_section(self, section_id: str, order: int) -> None:
        """Set a section's position."""
        ...

    async def move_task(
        self,
        task_id: str,
        section_id: str,
        order: int,
        project_id: str,
    ) -> None:
        """Place a task in a section at an index."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
