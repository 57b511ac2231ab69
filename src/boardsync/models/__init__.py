"""Data models."""

from .board import Board, Section, Task
from .boardsync_config import BoardOptions, BoardSyncConfig, HttpConfig
from .drag_ref import (
    ContainerRef,
    DragRef,
    DragSubject,
    PlaceholderRef,
    SectionRef,
    TaskRef,
)

__all__ = [
    "Board",
    "BoardOptions",
    "BoardSyncConfig",
    "ContainerRef",
    "DragRef",
    "DragSubject",
    "HttpConfig",
    "PlaceholderRef",
    "Section",
    "SectionRef",
    "Task",
    "TaskRef",
]
