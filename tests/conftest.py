"""Shared fixtures: an in-memory gateway and a compact board builder."""

import asyncio

import pytest

from boardsync.gateways import GatewayError
from boardsync.models import Board, Section, Task


def build_board(layout: dict[str, list[str]], project_id: str = "p1") -> Board:
    """Build a board from {section_id: [task_id, ...]} in insertion order."""
    sections = []
    for s_idx, (section_id, task_ids) in enumerate(layout.items()):
        tasks = [
            Task(id=task_id, title=task_id.upper(), order=t_idx, section_id=section_id)
            for t_idx, task_id in enumerate(task_ids)
        ]
        sections.append(
            Section(id=section_id, name=section_id.upper(), order=s_idx, project_id=project_id, tasks=tasks)
        )
    return Board(project_id=project_id, sections=sections)


def layout_of(board: Board) -> dict[str, list[str | None]]:
    """Inverse of build_board, for compact assertions."""
    return {s.id: s.task_ids for s in board.sections}


class FakeGateway:
    """In-memory gateway recording every write.

    ``board`` is what fetch_board returns. Set ``fail_with`` to make writes
    raise, ``fetch_error`` to make fetches raise, or ``gate`` to hold writes
    until the event is set.
    """

    def __init__(self, board: Board) -> None:
        self.board = board
        self.calls: list[tuple] = []
        self.fetch_count = 0
        self.fail_with: Exception | None = None
        self.fetch_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.closed = False

    async def fetch_board(self, project_id: str) -> Board:
        self.fetch_count += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.board.model_copy(deep=True)

    async def reorder_section(self, section_id: str, order: int) -> None:
        self.calls.append(("reorder_section", section_id, order))
        await self._write()

    async def move_task(self, task_id: str, section_id: str, order: int, project_id: str) -> None:
        self.calls.append(("move_task", task_id, section_id, order, project_id))
        await self._write()

    async def close(self) -> None:
        self.closed = True

    async def _write(self) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_board():
    """Board builder: make_board({"a": ["t1"], "b": []})."""
    return build_board


@pytest.fixture
def board() -> Board:
    """Two sections: A with t1, t2 and an empty B."""
    return build_board({"A": ["t1", "t2"], "B": []})


@pytest.fixture
def gateway(board: Board) -> FakeGateway:
    """Gateway whose authoritative board is the ``board`` fixture."""
    return FakeGateway(board)


@pytest.fixture
def server_error() -> GatewayError:
    return GatewayError("Section not found")
