"""Filesystem gateway backed by a YAML board store."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..models import Board
from .errors import GatewayError, GatewayNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS = ("To Do", "In Progress", "Completed")


class FilesystemGateway:
    """
    Gateway for boards stored in a local YAML file.

    The file keeps sections and tasks as flat per-project lists, the way the
    board server stores them, and writes apply the same order shifting the
    server performs. Layout::

        version: 1
        projects:
          <project_id>:
            sections: [{_id, name, order, isDefault}, ...]
            tasks: [{_id, title, order, sectionId, ...}, ...]
    """

    def __init__(self, store_path: Path) -> None:
        """
        Initialize gateway.

        Args:
            store_path: Path to the YAML store (created on first write)
        """
        self.store_path = store_path
        self._data: dict[str, Any] | None = None

    def ensure_directory(self) -> None:
        """Create the store's parent directory if it doesn't exist."""
        self.store_path.parent.mkdir(parents=True, exist_ok=True)

    def reload(self) -> None:
        """Drop the cached store so the next read hits the file."""
        self._data = None

    async def close(self) -> None:
        """Nothing to release."""
        return None

    # --- Gateway operations ---

    async def fetch_board(self, project_id: str) -> Board:
        """Read a project's board, creating default sections if it has none."""
        self.reload()
        project = self._project(project_id, create=True)

        if not project["sections"]:
            for idx, name in enumerate(DEFAULT_SECTIONS):
                project["sections"].append(
                    {"_id": uuid.uuid4().hex, "name": name, "order": idx, "isDefault": True}
                )
            self._save()
            logger.info("Created default sections for project %s", project_id)

        try:
            return Board.from_payload(project_id, self._group(project_id, project))
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise GatewayError(f"Invalid board store {self.store_path}: {e}") from e

    def _group(self, project_id: str, project: dict[str, Any]) -> list[dict[str, Any]]:
        """Nest a project's flat task list under its ordered sections."""
        sections = sorted(project["sections"], key=lambda s: s.get("order", 0))
        section_ids = {s["_id"] for s in sections}
        grouped: dict[str, list[dict[str, Any]]] = {s["_id"]: [] for s in sections}
        for task in project["tasks"]:
            owner = task.get("sectionId")
            if owner not in section_ids:
                # Tasks without a known section land in the first one
                owner = sections[0]["_id"]
            grouped[owner].append(task)

        payload = []
        for section in sections:
            tasks = sorted(grouped[section["_id"]], key=lambda t: t.get("order", 0))
            payload.append({**section, "projectId": project_id, "tasks": tasks})
        return payload

    async def reorder_section(self, section_id: str, order: int) -> None:
        """Set a section's order."""
        self.reload()
        _project_id, section = self._find_section(section_id)
        section["order"] = order
        self._save()
        logger.debug("Section %s order set to %d", section_id, order)

    async def move_task(
        self,
        task_id: str,
        section_id: str,
        order: int,
        project_id: str,
    ) -> None:
        """Move a task, shifting siblings to keep positions consistent."""
        self.reload()
        task_project_id, task = self._find_task(task_id)
        section_project_id, _section = self._find_section(section_id)
        if project_id and section_project_id != project_id:
            raise GatewayError("Section does not belong to this project")

        tasks = self._project(task_project_id)["tasks"]
        old_section_id = task.get("sectionId")
        old_order = task.get("order") or 0

        siblings = [t for t in tasks if t is not task]
        if old_section_id and old_section_id != section_id:
            for other in siblings:
                if other.get("sectionId") == old_section_id and other.get("order", 0) > old_order:
                    other["order"] -= 1
            for other in siblings:
                if other.get("sectionId") == section_id and other.get("order", 0) >= order:
                    other["order"] += 1
        elif old_section_id:
            for other in siblings:
                if other.get("sectionId") != section_id:
                    continue
                other_order = other.get("order", 0)
                if order > old_order and old_order < other_order <= order:
                    other["order"] -= 1
                elif order < old_order and order <= other_order < old_order:
                    other["order"] += 1

        task["sectionId"] = section_id
        task["order"] = order
        self._save()
        logger.debug("Task %s moved to %s at %d", task_id, section_id, order)

    # --- Store maintenance ---

    def write_board(self, board: Board) -> None:
        """Replace a project's stored sections and tasks with a board."""
        project = self._project(board.project_id, create=True)
        project["sections"] = []
        project["tasks"] = []
        for section in board.sections:
            data = section.model_dump(by_alias=True, exclude={"tasks", "project_id"})
            project["sections"].append(data)
            for task in section.tasks:
                task_data = task.model_dump(by_alias=True, exclude_none=True)
                if "_id" not in task_data:
                    task_data["_id"] = uuid.uuid4().hex
                task_data["sectionId"] = section.id
                project["tasks"].append(task_data)
        self._save()

    # --- Internals ---

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        data: dict[str, Any] = {}
        if self.store_path.exists():
            try:
                with self.store_path.open() as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise GatewayError(f"Cannot read board store {self.store_path}: {e}") from e
            if not isinstance(data, dict):
                raise GatewayError(f"Board store {self.store_path} is not a mapping")

        data.setdefault("version", 1)
        data.setdefault("projects", {})
        self._data = data
        return data

    def _save(self) -> None:
        data = self._load()
        self.ensure_directory()
        try:
            with self.store_path.open("w") as f:
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        except OSError as e:
            raise GatewayError(f"Cannot write board store {self.store_path}: {e}") from e

    def _project(self, project_id: str, create: bool = False) -> dict[str, Any]:
        projects = self._load()["projects"]
        if project_id not in projects:
            if not create:
                raise GatewayNotFoundError(f"Project not found: {project_id}")
            projects[project_id] = {"sections": [], "tasks": []}
        project = projects[project_id]
        project.setdefault("sections", [])
        project.setdefault("tasks", [])
        return project

    def _find_section(self, section_id: str) -> tuple[str, dict[str, Any]]:
        for project_id, project in self._load()["projects"].items():
            for section in project.get("sections", []):
                if section.get("_id") == section_id:
                    return project_id, section
        raise GatewayNotFoundError(f"Section not found: {section_id}")

    def _find_task(self, task_id: str) -> tuple[str, dict[str, Any]]:
        for project_id, project in self._load()["projects"].items():
            for task in project.get("tasks", []):
                if task.get("_id") == task_id:
                    return project_id, task
        raise GatewayNotFoundError(f"Task not found: {task_id}")
