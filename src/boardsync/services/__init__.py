"""Service layer for board logic."""

from .board_service import BoardService
from .board_state import BoardState
from .config_service import ConfigService
from .reconciler import CommitResult, PersistResult, Reconciler
from .reorder import (
    ReorderResult,
    SectionMove,
    StaleSubjectError,
    TaskMove,
    plan_reorder,
    reorder,
)

__all__ = [
    "BoardService",
    "BoardState",
    "CommitResult",
    "ConfigService",
    "PersistResult",
    "Reconciler",
    "ReorderResult",
    "SectionMove",
    "StaleSubjectError",
    "TaskMove",
    "plan_reorder",
    "reorder",
]
