"""Gateway selection from settings and project config."""

import logging

from ..config import Settings
from ..services.config_service import ConfigService
from .filesystem import FilesystemGateway
from .http import HttpGateway
from .protocol import GatewayProtocol

logger = logging.getLogger(__name__)


def create_gateway(settings: Settings, config_service: ConfigService) -> GatewayProtocol:
    """Build the gateway for the configured backend.

    Settings override boardsync.yml for the backend and API token.
    """
    config = config_service.get_config()
    backend = settings.backend or config.backend

    if backend == "http":
        logger.info("Using HTTP backend at %s", config.http.base_url)
        return HttpGateway.from_config(config.http, token=settings.api_token)

    store_path = config_service.store_path
    logger.info("Using file backend at %s", store_path)
    return FilesystemGateway(store_path)


def resolve_project_id(settings: Settings, config_service: ConfigService) -> str:
    """Project to open: settings first, then boardsync.yml."""
    return settings.project_id or config_service.get_config().project_id
