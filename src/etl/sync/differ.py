"""Snapshot differ.

Classifies a freshly aggregated catalog against the previously
persisted snapshot as added, removed, modified or unchanged.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from src.etl.aggregation.schemas import Film, FilmId
from src.etl.types import SnapshotChanges

logger = logging.getLogger(__name__)


# =============================================================================
# DIFF RESULT
# =============================================================================


@dataclass
class DiffResult:
    """Classification of new films against the previous snapshot.

    Attributes:
        added: Films absent from the previous snapshot.
        removed: Ids of previous films absent from the new catalog.
        modified: Films whose compared fields changed.
        unchanged_count: Films present and equal in both.
    """

    added: list[Film] = field(default_factory=list)
    removed: list[FilmId] = field(default_factory=list)
    modified: list[Film] = field(default_factory=list)
    unchanged_count: int = 0

    @property
    def has_changes(self) -> bool:
        """Whether anything was added, removed or modified."""
        return bool(self.added or self.removed or self.modified)

    @property
    def added_ids(self) -> set[FilmId]:
        """Ids of added films."""
        return {film.id for film in self.added}

    @property
    def modified_ids(self) -> set[FilmId]:
        """Ids of modified films."""
        return {film.id for film in self.modified}

    def to_changes(self) -> SnapshotChanges:
        """Summarize as snapshot change counts."""
        return SnapshotChanges(
            added=len(self.added),
            removed=len(self.removed),
            modified=len(self.modified),
        )

    def log_summary(self) -> None:
        """Log diff counts."""
        logger.info(
            "Diff: added=%d, removed=%d, modified=%d, unchanged=%d",
            len(self.added),
            len(self.removed),
            len(self.modified),
            self.unchanged_count,
        )


# =============================================================================
# DIFFER
# =============================================================================


class Differ:
    """Computes a DiffResult between two catalogs.

    Pure and idempotent. Runs in O(|old| + |new|) using hash lookups;
    equality goes through ``Film.comparison_key`` so reordering a
    multi-valued field never yields a modification.
    """

    def diff(self, old: Mapping[FilmId, Film], new: Iterable[Film]) -> DiffResult:
        """Classify new films against the previous snapshot.

        Args:
            old: Previous snapshot keyed by film id.
            new: Newly aggregated films (ids unique).

        Returns:
            DiffResult with added/modified in new-catalog order and
            removed in previous-snapshot order.
        """
        result = DiffResult()
        new_ids: set[FilmId] = set()

        for film in new:
            new_ids.add(film.id)
            previous = old.get(film.id)

            if previous is None:
                result.added.append(film)
            elif previous.comparison_key() != film.comparison_key():
                result.modified.append(film)
            else:
                result.unchanged_count += 1

        result.removed = [film_id for film_id in old if film_id not in new_ids]
        return result


def diff_films(old: Mapping[FilmId, Film], new: Iterable[Film]) -> DiffResult:
    """Classify new films against a previous snapshot.

    Args:
        old: Previous snapshot keyed by film id.
        new: Newly aggregated films.

    Returns:
        DiffResult.
    """
    return Differ().diff(old, new)
