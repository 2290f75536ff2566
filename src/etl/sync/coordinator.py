"""Sync run coordinator.

Drives one catalog synchronization through its steps:

    IDLE -> FETCHING -> NORMALIZING -> AGGREGATING -> DIFFING
         -> PERSISTING -> REPORTING -> DONE

Any step error moves the run to FAILED, records the failing step,
and leaves the persisted snapshot untouched.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import IntEnum, StrEnum
from typing import Any

from src.etl.aggregation import Aggregator, Film
from src.etl.errors import FetchError
from src.etl.extractors.mubi import CountryFetchResult, MubiExtractor, MubiNormalizer
from src.etl.loaders import BaseSnapshotLoader
from src.etl.sync.differ import Differ, DiffResult
from src.etl.types import LastSyncData, SnapshotMetadata
from src.etl.utils import RunGuard, setup_logger
from src.settings import settings

logger = setup_logger("etl.sync")


# =============================================================================
# STATES AND EXIT CODES
# =============================================================================


class SyncState(StrEnum):
    """Steps of a sync run."""

    IDLE = "idle"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    AGGREGATING = "aggregating"
    DIFFING = "diffing"
    PERSISTING = "persisting"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


class SyncExitCode(IntEnum):
    """Process exit codes of the sync command."""

    CHANGES = 0
    NO_CHANGES = 1
    FAILED = 2


def _utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Format a UTC datetime as ISO-8601 with millisecond precision and 'Z'."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# SYNC REPORT
# =============================================================================


@dataclass
class SyncReport:
    """Outcome of one sync run.

    Attributes:
        state: Final state (DONE or FAILED).
        failed_step: Step that raised, when the run failed.
        error: Error message, when the run failed.
        diff: Diff against the previous snapshot (None before DIFFING).
        countries: Countries requested for the run.
        failed_countries: Countries whose pagination was aborted.
        films_by_country: Normalized films per country.
        malformed_count: Records dropped by the normalizer.
        total_films: Distinct films in the new catalog.
        started_at: Run start.
        finished_at: Run end.
    """

    state: SyncState = SyncState.IDLE
    failed_step: SyncState | None = None
    error: str | None = None
    diff: DiffResult | None = None
    countries: list[str] = field(default_factory=list)
    failed_countries: list[str] = field(default_factory=list)
    films_by_country: dict[str, int] = field(default_factory=dict)
    malformed_count: int = 0
    total_films: int = 0
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the run reached DONE."""
        return self.state is SyncState.DONE

    @property
    def has_changes(self) -> bool:
        """Whether a successful run persisted any change."""
        return self.succeeded and self.diff is not None and self.diff.has_changes

    @property
    def exit_code(self) -> SyncExitCode:
        """Process exit code: 0 changes, 1 no changes, 2 failure."""
        if not self.succeeded:
            return SyncExitCode.FAILED
        return SyncExitCode.CHANGES if self.has_changes else SyncExitCode.NO_CHANGES

    @property
    def duration_seconds(self) -> float:
        """Run duration in seconds."""
        if not self.started_at or not self.finished_at:
            return 0.0
        return round((self.finished_at - self.started_at).total_seconds(), 2)

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary."""
        return {
            "state": str(self.state),
            "failed_step": str(self.failed_step) if self.failed_step else None,
            "error": self.error,
            "exit_code": int(self.exit_code),
            "total_films": self.total_films,
            "changes": dict(self.diff.to_changes()) if self.diff else None,
            "countries": list(self.countries),
            "failed_countries": list(self.failed_countries),
            "films_by_country": dict(self.films_by_country),
            "malformed_count": self.malformed_count,
            "duration_seconds": self.duration_seconds,
        }

    def log_summary(self) -> None:
        """Log the run outcome."""
        if not self.succeeded:
            logger.error(f"Sync failed during {self.failed_step}: {self.error}")
            return

        diff = self.diff or DiffResult()
        logger.info("=" * 60)
        logger.info(f"Sync complete in {self.duration_seconds:.2f}s")
        logger.info(f"  Films: {self.total_films} from {len(self.countries)} countries")
        logger.info(
            f"  Added: {len(diff.added)}, Removed: {len(diff.removed)}, "
            f"Modified: {len(diff.modified)}, Unchanged: {diff.unchanged_count}"
        )
        if self.failed_countries:
            logger.warning(f"  Failed countries: {', '.join(self.failed_countries)}")
        if self.malformed_count:
            logger.warning(f"  Malformed records dropped: {self.malformed_count}")
        logger.info("=" * 60)


# =============================================================================
# COORDINATOR
# =============================================================================


class SyncCoordinator:
    """Runs a sync from fetch to persisted snapshot.

    Every collaborator is injected. The loader is opened when the run
    starts and closed when it ends, whatever the outcome.
    """

    def __init__(
        self,
        loader: BaseSnapshotLoader,
        extractor: MubiExtractor | None = None,
        normalizer: MubiNormalizer | None = None,
        aggregator: Aggregator | None = None,
        differ: Differ | None = None,
        countries: Sequence[str] | None = None,
        guard: RunGuard | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize coordinator.

        Args:
            loader: Snapshot loader for the baseline and the new snapshot.
            extractor: Per-country fetcher (default MubiExtractor).
            normalizer: Raw record normalizer.
            aggregator: Multi-country aggregator.
            differ: Snapshot differ.
            countries: Countries in processing order (default from settings).
            guard: Cancellation/deadline guard shared with the extractor.
            clock: UTC clock (injectable for tests).
        """
        self._guard = guard or RunGuard(max_duration=settings.sync.max_duration_seconds)
        self._loader = loader
        self._extractor = extractor or MubiExtractor(guard=self._guard)
        self._normalizer = normalizer or MubiNormalizer()
        self._aggregator = aggregator or Aggregator()
        self._differ = differ or Differ()
        self._countries = list(countries or settings.mubi.countries)
        self._clock = clock
        self._state = SyncState.IDLE

    @property
    def state(self) -> SyncState:
        """Current step of the run."""
        return self._state

    @property
    def guard(self) -> RunGuard:
        """Cancellation guard of the run."""
        return self._guard

    # -------------------------------------------------------------------------
    # Main Run
    # -------------------------------------------------------------------------

    def run(self) -> SyncReport:
        """Execute one sync run.

        Never raises for step failures: they are captured in the
        returned report with state FAILED.

        Returns:
            SyncReport of the run.
        """
        report = SyncReport(countries=list(self._countries), started_at=self._clock())
        self._state = SyncState.IDLE
        self._guard.start()
        logger.info(f"Starting sync for {len(self._countries)} countries")

        try:
            with self._loader:
                self._execute(report)
        except Exception as e:
            report.failed_step = self._state
            report.error = str(e) or type(e).__name__
            logger.error(f"Step {self._state} failed: {e}", exc_info=True)
            self._state = SyncState.FAILED

        report.state = self._state
        report.finished_at = self._clock()
        report.log_summary()
        return report

    def _execute(self, report: SyncReport) -> None:
        """Run every step in order, updating the report."""
        self._transition(SyncState.FETCHING)
        results = self._fetch()
        report.failed_countries = [r.country for r in results if r.failed]

        self._transition(SyncState.NORMALIZING)
        per_country, report.malformed_count = self._normalize(results)

        self._transition(SyncState.AGGREGATING)
        films = self._aggregator.aggregate(per_country)
        report.films_by_country = dict(self._aggregator.stats.films_by_country)
        report.total_films = len(films)

        self._transition(SyncState.DIFFING)
        baseline = self._loader.read_all()
        report.diff = self._differ.diff(baseline, films)
        report.diff.log_summary()

        self._transition(SyncState.PERSISTING)
        metadata = self._build_metadata(films, report)
        self._loader.write_snapshot(films, metadata)

        self._transition(SyncState.REPORTING)
        self._transition(SyncState.DONE)

    def _transition(self, state: SyncState) -> None:
        logger.debug(f"{self._state} -> {state}")
        self._state = state

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _fetch(self) -> list[CountryFetchResult]:
        """Fetch every country; fail the run if none succeeded.

        Raises:
            FetchError: If every country failed.
        """
        results = self._extractor.extract(countries=self._countries)
        if results and all(r.failed for r in results):
            raise FetchError(f"All {len(results)} countries failed to fetch")
        return results

    def _normalize(self, results: list[CountryFetchResult]) -> tuple[dict[str, list[Film]], int]:
        """Normalize raw records per country, in processing order.

        Returns:
            Films keyed by country and the number of dropped records.
        """
        per_country: dict[str, list[Film]] = {}
        dropped_total = 0

        for result in results:
            films, dropped = self._normalizer.normalize_films(result.records, result.country)
            per_country[result.country] = films
            dropped_total += dropped

        return per_country, dropped_total

    def _build_metadata(self, films: list[Film], report: SyncReport) -> SnapshotMetadata:
        """Build snapshot metadata for the new catalog."""
        diff = report.diff or DiffResult()
        return SnapshotMetadata(
            countries=list(self._countries),
            total_films=len(films),
            films_by_country=dict(report.films_by_country),
            failed_countries=list(report.failed_countries),
            last_sync=LastSyncData(
                timestamp=format_timestamp(self._clock()),
                total_films=len(films),
                changes=diff.to_changes(),
            ),
        )
