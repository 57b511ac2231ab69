"""Configuration service for loading boardsync.yml."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models import BoardSyncConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading and caching project configuration."""

    CONFIG_FILE = "boardsync.yml"

    def __init__(self, project_root: Path) -> None:
        """Initialize the config service.

        Args:
            project_root: Path to the directory containing boardsync.yml
        """
        self.project_root = project_root
        self._config: BoardSyncConfig | None = None
        self._config_error: str | None = None

    @property
    def has_config_error(self) -> bool:
        """Check if there was an error loading config."""
        return self._config_error is not None

    @property
    def config_error(self) -> str | None:
        """Get the config error message if any."""
        return self._config_error

    @property
    def config_path(self) -> Path:
        return self.project_root / self.CONFIG_FILE

    @property
    def store_path(self) -> Path:
        """Full path to the YAML board store."""
        return self.get_config().store_path(self.project_root)

    def get_config(self) -> BoardSyncConfig:
        """Get configuration, loading from file if not cached."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def reload(self) -> None:
        """Clear cached configuration, forcing reload on next access."""
        self._config = None
        self._config_error = None

    def _load_config(self) -> BoardSyncConfig:
        """Load configuration from file or return default."""
        config_path = self.config_path
        self._config_error = None

        if not config_path.exists():
            logger.debug("No %s found, using defaults", self.CONFIG_FILE)
            return BoardSyncConfig.default()

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self._config_error = f"Invalid YAML in {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return BoardSyncConfig.default()

        if data is None:
            self._config_error = f"{self.CONFIG_FILE} is empty"
            logger.warning(self._config_error)
            return BoardSyncConfig.default()

        if not isinstance(data, dict):
            self._config_error = f"{self.CONFIG_FILE} must be a mapping"
            logger.warning(self._config_error)
            return BoardSyncConfig.default()

        try:
            config = BoardSyncConfig(**data)
        except ValidationError as e:
            self._config_error = f"Error loading {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return BoardSyncConfig.default()

        logger.info(
            "Loaded %s (project=%s, backend=%s)", self.CONFIG_FILE, config.project_id, config.backend
        )
        return config
