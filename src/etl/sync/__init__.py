"""Catalog sync package.

Provides the snapshot differ and the run coordinator.
"""

from src.etl.sync.coordinator import (
    SyncCoordinator,
    SyncExitCode,
    SyncReport,
    SyncState,
    format_timestamp,
)
from src.etl.sync.differ import Differ, DiffResult, diff_films

__all__ = [
    "Differ",
    "DiffResult",
    "diff_films",
    "SyncCoordinator",
    "SyncExitCode",
    "SyncReport",
    "SyncState",
    "format_timestamp",
]
