"""JSON file snapshot loader."""

from src.etl.loaders.json.loader import JsonSnapshotLoader

__all__ = ["JsonSnapshotLoader"]
