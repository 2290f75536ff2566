"""SQL database snapshot loader."""

from src.etl.loaders.database.loader import DatabaseSnapshotLoader

__all__ = ["DatabaseSnapshotLoader"]
