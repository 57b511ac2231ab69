"""Generate command for creating default config and board store."""

import asyncio
import logging
from pathlib import Path

import yaml

from ..gateways import FilesystemGateway, GatewayError
from ..models import BoardSyncConfig, Task
from ..services import ConfigService
from .output import error, info, success

logger = logging.getLogger(__name__)

# Header comments for generated file
CONFIG_HEADER = """\
# boardsync Board Configuration
#
# project_id: Board project to open
# backend: "file" (YAML store below) or "http" (board API)
# store: Relative path of the YAML board store (file backend)
#
# http:
#   base_url: Board API root, e.g. https://tasks.example.com
#   token_env: Environment variable holding the bearer token
#
# board:
#   can_manage_sections: Allow dragging sections to reorder them
#   poll_interval: Seconds between background refreshes (0 disables)
#   activation: "distance" (mouse) or "delay" (press-and-hold)
#   mouse_distance: Cells the pointer must travel before a drag starts
#   touch_delay / touch_tolerance: Press-and-hold activation

"""

SAMPLE_TASKS = (
    "Drag me to another section",
    "Press m to pick a task up with the keyboard",
    "Press M to move a whole section",
)


def generate_config_yaml() -> str:
    """Generate YAML config from the default BoardSyncConfig model."""
    config = BoardSyncConfig.default()
    yaml_content = yaml.safe_dump(config.model_dump(), default_flow_style=False, sort_keys=False)
    return CONFIG_HEADER + yaml_content


async def _seed_store(store_path: Path, project_id: str) -> bool:
    """Create default sections and sample tasks if the store doesn't exist."""
    if store_path.exists():
        return False

    gateway = FilesystemGateway(store_path)
    board = await gateway.fetch_board(project_id)
    first = board.sections[0]
    for idx, title in enumerate(SAMPLE_TASKS):
        first.tasks.append(Task(title=title, order=idx, section_id=first.id))
    gateway.write_board(board)
    return True


def run_generate(project_root: Path) -> int:
    """
    Generate default configuration and board store.

    Args:
        project_root: Path to project root where boardsync.yml will be created

    Returns:
        Exit code (0 = success, 1 = nothing to do or failure)
    """
    config_created = False
    config_service = ConfigService(project_root)

    if config_service.config_path.exists():
        info(f"Config exists: {config_service.config_path}")
    else:
        project_root.mkdir(parents=True, exist_ok=True)
        config_service.config_path.write_text(generate_config_yaml())
        success(f"Generated config: {config_service.config_path}")
        config_created = True

    config = config_service.get_config()
    if config_service.has_config_error:
        error(config_service.config_error or "Invalid config")
        return 1

    if config.backend != "file":
        info("HTTP backend configured, skipping board store")
        return 0 if config_created else 1

    store_path = config_service.store_path
    try:
        store_created = asyncio.run(_seed_store(store_path, config.project_id))
    except GatewayError as e:
        error(f"Failed to create board store: {e}")
        return 1

    if store_created:
        success(f"Created board store: {store_path}")
    else:
        info(f"Board store exists: {store_path}")

    if not config_created and not store_created:
        print("Nothing to generate.")
        return 1

    return 0
