"""Drag identifier codec.

A single flat namespace of string tokens covers both nesting levels of the
board. Token shapes:

- ``section::<section_id>``                 section (header / whole column)
- ``<section_id>::<task_id>::<index>``      task card
- ``<section_id>::empty``                   empty-section placeholder
- ``<section_id>``                          section task-area container

The decoder determines the kind from the token alone.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from ..models.drag_ref import (
    ContainerRef,
    PlaceholderRef,
    SectionRef,
    TaskRef,
)

if TYPE_CHECKING:
    from ..models import Section

SEPARATOR = "::"
SECTION_PREFIX = "section"
PLACEHOLDER_SUFFIX = "empty"


class InvalidIdentifierError(ValueError):
    """An id cannot be embedded in a drag token."""

    pass


class InvalidTokenError(ValueError):
    """A token does not match any known shape."""

    pass


def _check_id(value: str, name: str) -> str:
    if not value:
        raise InvalidIdentifierError(f"{name} cannot be empty")
    if SEPARATOR in value:
        raise InvalidIdentifierError(f"{name} cannot contain '{SEPARATOR}': {value!r}")
    if value.startswith(":") or value.endswith(":"):
        # "a:" + "::" would read back as "a" + ":::"
        raise InvalidIdentifierError(f"{name} cannot start or end with ':': {value!r}")
    return value


def _check_section_id(section_id: str) -> str:
    _check_id(section_id, "Section ID")
    if section_id == SECTION_PREFIX:
        raise InvalidIdentifierError(f"'{SECTION_PREFIX}' is reserved and cannot be a section ID")
    return section_id


def encode_section(section_id: str) -> str:
    """Encode a section-level token."""
    return f"{SECTION_PREFIX}{SEPARATOR}{_check_section_id(section_id)}"


def encode_task(section_id: str, task_id: str, index: int) -> str:
    """Encode a task token carrying its section and current index."""
    _check_section_id(section_id)
    _check_id(task_id, "Task ID")
    if index < 0:
        raise InvalidIdentifierError(f"Task index must be non-negative: {index}")
    return f"{section_id}{SEPARATOR}{task_id}{SEPARATOR}{index}"


def encode_placeholder(section_id: str) -> str:
    """Encode the empty-section placeholder token."""
    return f"{_check_section_id(section_id)}{SEPARATOR}{PLACEHOLDER_SUFFIX}"


def encode_container(section_id: str) -> str:
    """Encode the section container token (the bare section id)."""
    return _check_section_id(section_id)


def decode(token: str) -> SectionRef | TaskRef | PlaceholderRef | ContainerRef:
    """Decode a token into its tagged reference.

    Raises:
        InvalidTokenError: The token matches no known shape.
    """
    if not token:
        raise InvalidTokenError("Empty token")

    parts = token.split(SEPARATOR)
    if any(not part or part.startswith(":") or part.endswith(":") for part in parts):
        raise InvalidTokenError(f"Malformed token: {token!r}")

    match parts:
        case [section_id]:
            if section_id == SECTION_PREFIX:
                raise InvalidTokenError(f"Malformed token: {token!r}")
            return ContainerRef(section_id=section_id)
        case [first, second] if first == SECTION_PREFIX:
            return SectionRef(section_id=second)
        case [section_id, second] if second == PLACEHOLDER_SUFFIX:
            return PlaceholderRef(section_id=section_id)
        case [section_id, task_id, raw_index] if section_id != SECTION_PREFIX:
            if not (raw_index.isascii() and raw_index.isdigit()):
                raise InvalidTokenError(f"Invalid task index in token: {token!r}")
            return TaskRef(section_id=section_id, task_id=task_id, index=int(raw_index))

    raise InvalidTokenError(f"Unrecognized token: {token!r}")


def try_decode(token: str | None) -> SectionRef | TaskRef | PlaceholderRef | ContainerRef | None:
    """Decode a token, returning None when it is missing or invalid."""
    if token is None:
        return None
    try:
        return decode(token)
    except InvalidTokenError:
        return None


def encode(ref: SectionRef | TaskRef | PlaceholderRef | ContainerRef) -> str:
    """Encode any decoded reference back into its token."""
    if isinstance(ref, SectionRef):
        return encode_section(ref.section_id)
    if isinstance(ref, TaskRef):
        return encode_task(ref.section_id, ref.task_id, ref.index)
    if isinstance(ref, PlaceholderRef):
        return encode_placeholder(ref.section_id)
    return encode_container(ref.section_id)


def task_tokens(section: Section) -> Iterator[str]:
    """Yield tokens for a section's draggable tasks.

    Tasks without a durable id are skipped; the embedded index is the
    task's position in the full task list.
    """
    for idx, task in enumerate(section.tasks):
        if not task.id:
            continue
        yield encode_task(section.id, task.id, idx)
