"""Board state models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator


class Task(BaseModel):
    """A single task card within a section.

    Field aliases follow the board API wire format (``_id``, ``sectionId``),
    either name is accepted on input.
    """

    # None until the task has been persisted; such tasks are never draggable
    id: str | None = Field(default=None, alias="_id")
    title: str = ""
    order: int = 0
    section_id: str | None = Field(default=None, alias="sectionId")

    # Display fields carried through from the board payload
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: str | None = Field(default=None, alias="dueDate")

    model_config = {"populate_by_name": True}

    @property
    def is_persisted(self) -> bool:
        """Whether the task has a durable id."""
        return bool(self.id)

    @property
    def display_title(self) -> str:
        """Title for display - falls back to the id."""
        return self.title or self.id or "Untitled"


class Section(BaseModel):
    """An ordered column of tasks."""

    id: str = Field(..., alias="_id", min_length=1)
    name: str = ""
    order: int = 0
    is_default: bool = Field(default=False, alias="isDefault")
    project_id: str | None = Field(default=None, alias="projectId")
    tasks: list[Task] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _claim_tasks(self) -> Section:
        """Tasks listed under a section without an owner belong to it."""
        for task in self.tasks:
            if task.section_id is None:
                task.section_id = self.id
        return self

    @property
    def task_ids(self) -> list[str | None]:
        """Task ids in display order."""
        return [t.id for t in self.tasks]

    def index_of(self, task_id: str) -> int:
        """Get position of a task in this section, or -1 if not found."""
        for idx, task in enumerate(self.tasks):
            if task.id == task_id:
                return idx
        return -1


class Board(BaseModel):
    """Full ordered section/task tree for one project."""

    project_id: str
    sections: list[Section] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, project_id: str, sections: list[dict[str, Any]]) -> Board:
        """Create a Board from the ``sections`` list of a board response."""
        return cls(project_id=project_id, sections=sections)  # pyrefly: ignore[bad-argument-type]

    def to_payload(self) -> list[dict[str, Any]]:
        """Serialize sections in wire format."""
        return [s.model_dump(by_alias=True) for s in self.sections]

    @property
    def section_ids(self) -> list[str]:
        """Section ids in display order."""
        return [s.id for s in self.sections]

    def get_section(self, section_id: str) -> Section | None:
        """Get a section by id."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def section_index(self, section_id: str) -> int:
        """Get position of a section, or -1 if not found."""
        for idx, section in enumerate(self.sections):
            if section.id == section_id:
                return idx
        return -1

    def find_task(self, task_id: str) -> tuple[Section, int] | None:
        """Locate a task by id.

        Returns:
            (owning section, index within it) or None if not on the board.
        """
        for section in self.sections:
            idx = section.index_of(task_id)
            if idx >= 0:
                return section, idx
        return None

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by id."""
        found = self.find_task(task_id)
        if found is None:
            return None
        section, idx = found
        return section.tasks[idx]

    @property
    def task_count(self) -> int:
        """Total number of tasks on the board."""
        return sum(len(s.tasks) for s in self.sections)
