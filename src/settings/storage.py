"""Snapshot storage configuration settings.

Selects the snapshot backend (flat JSON file or SQL database) and
its location.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.settings.base import resolve_path

BACKEND_JSON = "json"
BACKEND_DATABASE = "database"
BACKENDS = frozenset({BACKEND_JSON, BACKEND_DATABASE})


class StorageSettings(BaseSettings):
    """Snapshot storage configuration.

    Attributes:
        backend: Snapshot backend, ``json`` or ``database``.
        snapshot_path: JSON snapshot file (relative to project root).
        url: SQLAlchemy database URL for the ``database`` backend.
            Relative SQLite file paths are anchored at the project root.
        echo: Log SQL statements.
    """

    backend: str = Field(default=BACKEND_JSON, alias="STORAGE_BACKEND")
    snapshot_path: str = Field(
        default="data/processed/mubi-films.json",
        alias="SNAPSHOT_PATH",
    )
    url: str = Field(
        default="sqlite:///data/catalog.db",
        alias="DATABASE_URL",
        validate_default=True,
    )
    echo: bool = Field(default=False, alias="DATABASE_ECHO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("backend")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        """Lowercase the backend name and reject unknown ones."""
        backend = v.strip().lower()
        if backend not in BACKENDS:
            raise ValueError(f"Unknown STORAGE_BACKEND {v!r}, expected one of {sorted(BACKENDS)}")
        return backend

    @field_validator("url")
    @classmethod
    def anchor_sqlite_path(cls, v: str) -> str:
        """Resolve a relative SQLite file path against the project root."""
        prefix = "sqlite:///"
        if not v.startswith(prefix):
            return v
        database = v[len(prefix) :]
        if not database or database.startswith(":memory:") or Path(database).is_absolute():
            return v
        return f"{prefix}{resolve_path(database)}"

    @property
    def snapshot_file(self) -> Path:
        """Absolute JSON snapshot path."""
        return resolve_path(self.snapshot_path)
