"""Base snapshot loader abstract class.

Provides the common interface for reading the previous catalog
snapshot and replacing it with a new one.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from types import TracebackType
from typing import Self

from src.etl.aggregation.schemas import Film, FilmId
from src.etl.errors import SnapshotReadError
from src.etl.types import SnapshotMetadata
from src.etl.utils.logger import setup_logger


@dataclass
class LoaderStats:
    """Statistics for a snapshot write.

    Attributes:
        written: Films written to the snapshot.
        deleted: Films dropped from the previous snapshot.
    """

    written: int = 0
    deleted: int = 0


class BaseSnapshotLoader(ABC):
    """Abstract base class for snapshot loaders.

    A loader reads the baseline once per run and replaces it
    all-or-nothing at the end of a successful run.

    Attributes:
        name: Loader identifier for logging.
    """

    name: str = "base"

    def __init__(self) -> None:
        """Initialize loader logger and statistics."""
        self._logger = setup_logger(f"etl.loader.{self.name}")
        self._stats = LoaderStats()

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    @property
    def stats(self) -> LoaderStats:
        """Statistics of the last write."""
        return self._stats

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def open(self) -> None:  # noqa: B027
        """Acquire resources. No-op by default."""

    def close(self) -> None:  # noqa: B027
        """Release resources. No-op by default."""

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Snapshot access
    # -------------------------------------------------------------------------

    @abstractmethod
    def read_films(self) -> list[Film]:
        """Read the persisted films in snapshot order.

        Returns:
            Films of the previous snapshot, empty if none exists.

        Raises:
            SnapshotReadError: If the snapshot exists but cannot be read.
        """

    @abstractmethod
    def read_metadata(self) -> SnapshotMetadata | None:
        """Read the persisted snapshot metadata.

        Returns:
            Metadata, or None if no snapshot exists.

        Raises:
            SnapshotReadError: If the snapshot exists but cannot be read.
        """

    @abstractmethod
    def write_snapshot(self, films: Iterable[Film], metadata: SnapshotMetadata) -> None:
        """Replace the persisted snapshot atomically.

        Args:
            films: Complete new catalog.
            metadata: Snapshot metadata.

        Raises:
            PersistenceError: If the snapshot cannot be written.
                The previous snapshot is left intact.
        """

    def check_storage(self) -> bool:
        """Whether the snapshot storage can be reached right now."""
        return True

    def read_all(self) -> dict[FilmId, Film]:
        """Read the previous snapshot keyed by film id.

        Returns:
            Films keyed by id, in snapshot order.

        Raises:
            SnapshotReadError: If the snapshot is unreadable or holds
                duplicate ids.
        """
        films: dict[FilmId, Film] = {}
        for film in self.read_films():
            if film.id in films:
                raise SnapshotReadError(f"Duplicate film id {film.id!r} in snapshot")
            films[film.id] = film

        self._logger.info(f"Loaded baseline with {len(films)} films")
        return films

    def _log_summary(self) -> None:
        """Log final write statistics."""
        self._logger.info(
            f"{self.name} snapshot written: "
            f"written={self._stats.written}, "
            f"deleted={self._stats.deleted}"
        )
