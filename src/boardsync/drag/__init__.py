"""Drag identifiers, sessions and input handling."""

from .identifiers import (
    InvalidIdentifierError,
    InvalidTokenError,
    decode,
    encode,
    encode_container,
    encode_placeholder,
    encode_section,
    encode_task,
    task_tokens,
    try_decode,
)
from .keyboard import next_target, section_targets
from .sensors import ActivationConstraint, PointerSensor
from .session import DragSessionController, DragState, DropResult, subject_key

__all__ = [
    "ActivationConstraint",
    "DragSessionController",
    "DragState",
    "DropResult",
    "InvalidIdentifierError",
    "InvalidTokenError",
    "PointerSensor",
    "decode",
    "encode",
    "encode_container",
    "encode_placeholder",
    "encode_section",
    "encode_task",
    "next_target",
    "section_targets",
    "subject_key",
    "task_tokens",
    "try_decode",
]
