"""Command Line Interface for the catalog sync.

Provides argument parsing and handlers for running a sync and
printing the status of the persisted snapshot. The process exit
code of a sync is 0 when changes were persisted, 1 when nothing
changed and 2 on failure.
"""

import argparse
import json
import signal
import sys
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from types import FrameType

from src.etl.errors import CatalogSyncError
from src.etl.extractors.mubi import MubiExtractor
from src.etl.loaders import BaseSnapshotLoader, create_loader
from src.etl.sync import SyncCoordinator, SyncExitCode, SyncReport
from src.etl.utils import RunGuard, setup_logger
from src.settings import get_masked_settings, settings
from src.settings.sources import parse_countries
from src.settings.storage import BACKEND_DATABASE, BACKEND_JSON

logger = setup_logger("etl.pipeline.cli")


# =============================================================================
# ARGUMENT PARSING
# =============================================================================


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add snapshot backend selection arguments.

    Args:
        parser: Parser or subparser to extend.
    """
    parser.add_argument(
        "--backend",
        choices=[BACKEND_JSON, BACKEND_DATABASE],
        default=None,
        help=f"Snapshot backend (default: {settings.storage.backend})",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help=f"JSON snapshot path (default: {settings.storage.snapshot_path})",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy URL for the database backend",
    )


def add_sync_arguments(parser: argparse.ArgumentParser) -> None:
    """Add sync command arguments.

    Args:
        parser: Parser or subparser to extend.
    """
    parser.add_argument(
        "--countries",
        nargs="+",
        default=None,
        metavar="CODE",
        help="Country codes to sync, in order (default: MUBI_COUNTRIES)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Maximum pages per country (default: all)",
    )
    add_storage_arguments(parser)


def _parse_cli_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments (default: sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(description="Sync the MUBI playable film catalog")
    add_sync_arguments(parser)
    return parser.parse_args(argv)


# =============================================================================
# SIGNAL HANDLING
# =============================================================================


@contextmanager
def cancel_on_sigint(guard: RunGuard) -> Iterator[None]:
    """Turn Ctrl-C into a cooperative cancellation of the run.

    The extractor stops before its next page; a snapshot write that
    already started completes.

    Args:
        guard: Guard to cancel on SIGINT.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum: int, frame: FrameType | None) -> None:
        logger.warning("⚠️ Interrupt received, cancelling sync")
        guard.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


# =============================================================================
# COMMAND HANDLERS
# =============================================================================


def build_loader(args: argparse.Namespace) -> BaseSnapshotLoader:
    """Build the snapshot loader selected by the arguments.

    Args:
        args: Parsed arguments with backend/output/database_url.

    Returns:
        Unopened snapshot loader.
    """
    return create_loader(
        backend=args.backend,
        path=args.output,
        url=args.database_url,
    )


def build_coordinator(args: argparse.Namespace) -> SyncCoordinator:
    """Wire a coordinator from parsed arguments and settings.

    Args:
        args: Parsed sync arguments.

    Returns:
        Ready-to-run coordinator.
    """
    countries = parse_countries(",".join(args.countries)) if args.countries else None
    guard = RunGuard(max_duration=settings.sync.max_duration_seconds)
    extractor = MubiExtractor(max_pages=args.max_pages, guard=guard)

    return SyncCoordinator(
        loader=build_loader(args),
        extractor=extractor,
        countries=countries,
        guard=guard,
    )


def print_report(report: SyncReport) -> None:
    """Print a short run summary on stdout.

    Args:
        report: Finished sync report.
    """
    if not report.succeeded:
        print(f"❌ Sync failed during {report.failed_step}: {report.error}", file=sys.stderr)
        return

    changes = report.diff.to_changes() if report.diff else {"added": 0, "removed": 0, "modified": 0}
    status = "changes persisted" if report.has_changes else "no changes"
    print(
        f"✅ Sync complete ({status}): {report.total_films} films, "
        f"+{changes['added']} -{changes['removed']} ~{changes['modified']}"
    )
    if report.failed_countries:
        print(f"⚠️ Failed countries: {', '.join(report.failed_countries)}")


def run_sync(args: argparse.Namespace) -> int:
    """Handle the sync command.

    Args:
        args: Parsed sync arguments.

    Returns:
        Process exit code.
    """
    logger.debug(f"Effective configuration: {get_masked_settings()}")
    coordinator = build_coordinator(args)
    with cancel_on_sigint(coordinator.guard):
        report = coordinator.run()

    print_report(report)
    return int(report.exit_code)


def run_status(args: argparse.Namespace) -> int:
    """Handle the status command: print the persisted snapshot metadata.

    Args:
        args: Parsed arguments with storage selection.

    Returns:
        0 when a snapshot exists, 1 when none does, 2 when unreadable.
    """
    try:
        with build_loader(args) as loader:
            metadata = loader.read_metadata()
    except CatalogSyncError as e:
        print(f"❌ {e}", file=sys.stderr)
        return int(SyncExitCode.FAILED)

    if metadata is None:
        print("No snapshot has been written yet")
        return 1

    print(json.dumps(metadata, indent=2, ensure_ascii=False))
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for the sync command."""
    try:
        args = _parse_cli_arguments(argv)
        sys.exit(run_sync(args))
    except Exception as e:
        print(f"\n❌ FATAL ERROR: {e}", file=sys.stderr)
        logger.error(f"Sync aborted: {e}", exc_info=True)
        sys.exit(int(SyncExitCode.FAILED))


if __name__ == "__main__":
    main()
