"""Snapshot document types.

TypedDict definitions for the persisted catalog snapshot
metadata shared by every snapshot loader.
"""

from typing import NotRequired, TypedDict


class SnapshotChanges(TypedDict):
    """Change counts of the last sync."""

    added: int
    removed: int
    modified: int


class LastSyncData(TypedDict):
    """Summary of the last successful sync."""

    timestamp: str
    total_films: int
    changes: SnapshotChanges


class SnapshotMetadata(TypedDict):
    """Metadata stored next to the film list."""

    countries: list[str]
    total_films: int
    films_by_country: NotRequired[dict[str, int]]
    failed_countries: NotRequired[list[str]]
    last_sync: NotRequired[LastSyncData]
