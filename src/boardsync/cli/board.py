"""Non-interactive board commands: show and drop."""

from __future__ import annotations

import asyncio
import logging

from ..config import Settings
from ..drag import encode_container, encode_placeholder, encode_section, encode_task
from ..gateways import GatewayError
from ..gateways.factory import create_gateway, resolve_project_id
from ..models import Board
from ..services import BoardService, ConfigService
from .output import detail, error, header, info, success

logger = logging.getLogger(__name__)


def print_board(board: Board) -> None:
    """Print sections and tasks with their drag tokens."""
    header(f"Project {board.project_id}: {len(board.sections)} sections, {board.task_count} tasks")
    for section in board.sections:
        default = " (default)" if section.is_default else ""
        info(f"[{section.order}] {section.name}{default}  {encode_section(section.id)}")
        if not section.tasks:
            detail(f"(empty)  {encode_placeholder(section.id)}")
            continue
        for idx, task in enumerate(section.tasks):
            token = encode_task(section.id, task.id, idx) if task.id else "(not draggable)"
            detail(f"{task.order}. {task.display_title}  {token}")
        detail(f"(end)  {encode_container(section.id)}")


def run_show(settings: Settings) -> int:
    """Print the current board. Returns exit code."""
    return asyncio.run(_show(settings))


async def _show(settings: Settings) -> int:
    config_service = ConfigService(settings.project_root)
    gateway = create_gateway(settings, config_service)
    project_id = resolve_project_id(settings, config_service)
    try:
        board = await gateway.fetch_board(project_id)
    except GatewayError as e:
        error(f"Failed to load board: {e}")
        return 1
    finally:
        await gateway.close()

    print_board(board)
    return 0


def run_drop(settings: Settings, source: str, target: str) -> int:
    """Drag source token onto target token and persist. Returns exit code."""
    return asyncio.run(_drop(settings, source, target))


async def _drop(settings: Settings, source: str, target: str) -> int:
    config_service = ConfigService(settings.project_root)
    config = config_service.get_config()
    gateway = create_gateway(settings, config_service)
    service = BoardService(
        gateway,
        resolve_project_id(settings, config_service),
        can_manage_sections=config.board.can_manage_sections,
    )
    try:
        if await service.mount() is None:
            error("Failed to load board")
            return 1

        if not service.can_drag(source):
            error(f"Cannot drag {source!r}")
            return 1

        result = await service.move(source, target)
        if result is None:
            info("Nothing to move")
        elif not result.ok:
            error(f"Move failed: {result.error}")
            if result.reloaded:
                info("Board reloaded from the store")
            return 1
        else:
            success("Move saved")

        if service.board is not None:
            print_board(service.board)
        return 0
    finally:
        service.unmount()
        await gateway.close()
