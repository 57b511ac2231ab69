"""Application settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings.

    Values come from CLI arguments and ``BOARDSYNC_*`` environment
    variables. Project-level options live in boardsync.yml; the fields
    below that mirror them override the file when set.
    """

    project_root: Path = Field(
        default=Path(),
        description="Path to project root containing boardsync.yml",
    )

    project_id: str | None = Field(
        default=None,
        description="Board project to open (overrides boardsync.yml)",
    )

    backend: Literal["file", "http"] | None = Field(
        default=None,
        description="Persistence backend (overrides boardsync.yml)",
    )

    api_token: str | None = Field(
        default=None,
        description="Bearer token for the HTTP backend",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "BOARDSYNC_",
    }
