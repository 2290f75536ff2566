"""Catalog sync command line package.

Public API:
    - run_sync: Run one sync from parsed arguments
    - run_status: Print the persisted snapshot metadata
    - main: CLI entry point
"""

from src.etl.pipeline.cli import (
    add_storage_arguments,
    add_sync_arguments,
    build_coordinator,
    build_loader,
    main,
    run_status,
    run_sync,
)

__all__ = [
    "add_storage_arguments",
    "add_sync_arguments",
    "build_coordinator",
    "build_loader",
    "main",
    "run_status",
    "run_sync",
]
