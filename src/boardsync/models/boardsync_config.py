"""Configuration models for boardsync.yml."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


def _validate_identifier(value: str, name: str = "ID") -> str:
    """Validate an identifier can be embedded in drag tokens."""
    if not value:
        raise ValueError(f"{name} cannot be empty")
    if "::" in value:
        raise ValueError(f"{name} cannot contain '::'")
    if value != value.strip():
        raise ValueError(f"{name} cannot have surrounding whitespace")
    return value


class HttpConfig(BaseModel):
    """Connection settings for the HTTP board API."""

    base_url: str = Field(default="http://localhost:3000", min_length=1)
    token_env: str = Field(
        default="BOARDSYNC_API_TOKEN",
        description="Environment variable holding the bearer token",
    )
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")


class BoardOptions(BaseModel):
    """Board interaction settings."""

    can_manage_sections: bool = True
    poll_interval: float = Field(
        default=0.0,
        ge=0,
        description="Seconds between background refreshes (0 disables polling)",
    )

    # Pointer activation constraints
    activation: Literal["distance", "delay"] = Field(
        default="distance",
        description="Start drags after moving (mouse) or after press-and-hold (touch)",
    )
    mouse_distance: int = Field(default=2, ge=0)
    touch_delay: float = Field(default=0.08, ge=0)
    touch_tolerance: int = Field(default=6, ge=0)


class BoardSyncConfig(BaseModel):
    """Root configuration model for boardsync.yml."""

    version: int = 1
    project_id: str = "default"
    backend: Literal["file", "http"] = "file"
    store: str = Field(
        default=".boardsync/board.yaml",
        description="Path of the YAML board store (file backend)",
    )
    http: HttpConfig = Field(default_factory=HttpConfig)
    board: BoardOptions = Field(default_factory=BoardOptions)

    @field_validator("project_id")
    @classmethod
    def validate_project_id(cls, v: str) -> str:
        """Validate project ID format."""
        return _validate_identifier(v, "Project ID")

    @field_validator("store")
    @classmethod
    def validate_store(cls, v: str) -> str:
        """Validate store path is relative."""
        if Path(v).is_absolute():
            raise ValueError("store must be a relative path")
        if ".." in Path(v).parts:
            raise ValueError("store cannot contain '..'")
        return v

    @classmethod
    def default(cls) -> "BoardSyncConfig":
        """Create default configuration."""
        return cls()

    def store_path(self, project_root: Path) -> Path:
        """Get full path to the YAML board store."""
        return project_root / self.store
