"""Base configuration settings.

Project paths, logging, and limits of a single sync run.
Relative paths from the environment resolve against the project
root, never against the current working directory.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def resolve_path(value: str | Path) -> Path:
    """Anchor a relative path at the project root.

    Args:
        value: Absolute or project-relative path.

    Returns:
        Absolute path.
    """
    path = Path(value)
    return path if path.is_absolute() else PROJECT_ROOT / path


# =============================================================================
# PATH SETTINGS
# =============================================================================


class PathsSettings(BaseSettings):
    """Data directory layout.

    Attributes:
        data_root: Data directory (DATA_DIR), project-relative by default.
    """

    data_root: str = Field(default="data", alias="DATA_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def data_dir(self) -> Path:
        """Absolute data directory."""
        return resolve_path(self.data_root)

    @property
    def processed_dir(self) -> Path:
        """Directory holding the published JSON snapshot."""
        return self.data_dir / "processed"

    def ensure_directories(self) -> None:
        """Create the data directories."""
        self.processed_dir.mkdir(parents=True, exist_ok=True)


# =============================================================================
# LOGGING SETTINGS
# =============================================================================


class LoggingSettings(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Level name applied to every sync logger.
        log_dir: Directory of the dated log files.
        to_file: Also write each logger to a dated file.
    """

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    to_file: bool = Field(default=True, alias="LOG_TO_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept only standard level names, case-insensitively."""
        name = v.upper()
        if name not in logging.getLevelNamesMapping() or name == "NOTSET":
            raise ValueError(f"Unknown LOG_LEVEL: {v!r}")
        return name

    @property
    def level_number(self) -> int:
        """Numeric logging level."""
        return logging.getLevelNamesMapping()[self.level]

    @property
    def log_path(self) -> Path:
        """Absolute log directory."""
        return resolve_path(self.log_dir)


# =============================================================================
# SYNC RUN SETTINGS
# =============================================================================


class SyncSettings(BaseSettings):
    """Limits and identity of a sync run.

    Attributes:
        user_agent: User-Agent header sent to the upstream API.
        max_duration_seconds: Overall run deadline, checked before
            each page fetch. Unset means no deadline.
    """

    user_agent: str = Field(default="mubi-catalog-sync/1.0", alias="USER_AGENT")
    max_duration_seconds: float | None = Field(
        default=None,
        gt=0,
        alias="SYNC_MAX_DURATION_SECONDS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
