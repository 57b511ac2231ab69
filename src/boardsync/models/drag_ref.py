"""Decoded drag identifier models.

A drag identifier is an opaque string token (see ``boardsync.drag.identifiers``).
Decoding produces one of the models below, a closed union discriminated by
the ``kind`` field. Use ``isinstance()`` or ``kind`` to narrow.

- ``SectionRef``: a section being reordered (or a section header as target)
- ``TaskRef``: a task card with its owning section and position
- ``PlaceholderRef``: the drop area shown in an empty section
- ``ContainerRef``: the droppable task area of a section column
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class SectionRef(BaseModel):
    """Section-level identifier."""

    kind: Literal["section"] = "section"
    section_id: str

    model_config = {"frozen": True}


class TaskRef(BaseModel):
    """Task-level identifier.

    The index is the task's position within its section at the time the
    token was issued.
    """

    kind: Literal["task"] = "task"
    section_id: str
    task_id: str
    index: int = Field(..., ge=0)

    model_config = {"frozen": True}


class PlaceholderRef(BaseModel):
    """Empty-section placeholder."""

    kind: Literal["placeholder"] = "placeholder"
    section_id: str

    model_config = {"frozen": True}


class ContainerRef(BaseModel):
    """Section task-area container."""

    kind: Literal["container"] = "container"
    section_id: str

    model_config = {"frozen": True}


DragRef = Annotated[
    SectionRef | TaskRef | PlaceholderRef | ContainerRef,
    Field(discriminator="kind"),
]

# Refs that can be picked up
DragSubject = SectionRef | TaskRef
