"""ETL data types package.

Exports all TypedDict definitions for raw upstream payloads
and persisted snapshot documents.

Usage:
    from src.etl.types import MubiFilmData, SnapshotMetadata
"""

from src.etl.types.mubi import (
    MubiBrowseResponse,
    MubiDirectorData,
    MubiFilmData,
    MubiPageMeta,
    MubiStillsData,
)
from src.etl.types.pipeline import ExtractionSummary
from src.etl.types.snapshot import LastSyncData, SnapshotChanges, SnapshotMetadata

__all__ = [
    # MUBI
    "MubiFilmData",
    "MubiDirectorData",
    "MubiStillsData",
    "MubiPageMeta",
    "MubiBrowseResponse",
    # Snapshot
    "SnapshotMetadata",
    "SnapshotChanges",
    "LastSyncData",
    # Extraction
    "ExtractionSummary",
]
