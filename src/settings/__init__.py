"""Centralized configuration for the catalog sync project.

Every setting has a default that lets a sync run out of the box;
environment variables and the project .env file override them.

Usage:
    from src.settings import settings

    settings.mubi.countries
    settings.storage.snapshot_file
"""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.settings.api import APISettings, CORSSettings
from src.settings.base import LoggingSettings, PathsSettings, SyncSettings
from src.settings.sources import MubiSettings
from src.settings.storage import StorageSettings

__all__ = [
    "Settings",
    "settings",
    "PathsSettings",
    "LoggingSettings",
    "SyncSettings",
    "MubiSettings",
    "StorageSettings",
    "APISettings",
    "CORSSettings",
    "get_masked_settings",
]

# (section, key) pairs never written to logs
SECRET_KEYS: frozenset[tuple[str, str]] = frozenset({("storage", "url")})
MASK = "***MASKED***"


class Settings(BaseSettings):
    """All configuration sections of the project.

    Use the module singleton: ``from src.settings import settings``.
    """

    paths: PathsSettings = Field(default_factory=PathsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
    mubi: MubiSettings = Field(default_factory=MubiSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def model_post_init(self, _: Any) -> None:
        """Create data directories once settings are loaded."""
        self.paths.ensure_directories()


settings = Settings()


def get_masked_settings() -> dict[str, Any]:
    """Dump the settings with secret values replaced.

    Returns:
        Configuration dictionary safe for logging.
    """
    config = settings.model_dump()
    for section, key in SECRET_KEYS:
        if config.get(section, {}).get(key):
            config[section][key] = MASK
    return config
