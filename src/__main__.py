"""Entry point of the src package. Enables python -m src."""

import argparse
import sys

from src.etl.pipeline import add_storage_arguments, add_sync_arguments, run_status, run_sync


def run_api() -> int:
    """Start the FastAPI read API."""
    import uvicorn

    from src.settings import settings

    print("🌐 Starting catalog API...")
    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main CLI."""
    parser = argparse.ArgumentParser(
        description="MUBI catalog sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src sync                              # Sync every configured country
  python -m src sync --countries PT DE            # Sync two countries
  python -m src sync --backend database           # Persist to the SQL database
  python -m src status                            # Show snapshot metadata
  python -m src api                               # Serve the read API
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    sync_parser = subparsers.add_parser("sync", help="Fetch, diff and persist the catalog")
    add_sync_arguments(sync_parser)

    status_parser = subparsers.add_parser("status", help="Show the persisted snapshot metadata")
    add_storage_arguments(status_parser)

    subparsers.add_parser("api", help="Serve the FastAPI read API")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "sync":
            code = run_sync(args)
        elif args.command == "status":
            code = run_status(args)
        else:
            code = run_api()
    except Exception as e:
        print(f"\n❌ ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    sys.exit(code)


if __name__ == "__main__":
    main()
