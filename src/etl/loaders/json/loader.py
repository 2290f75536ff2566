"""JSON file snapshot loader.

Persists the catalog as a single indented UTF-8 document with
``films`` and ``metadata`` keys. Writes go to a temporary file in
the same directory which then replaces the target, so readers
never observe a partially written snapshot.
"""

import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.etl.aggregation.schemas import Film, FilmId
from src.etl.errors import PersistenceError, SnapshotReadError
from src.etl.loaders.base import BaseSnapshotLoader, LoaderStats
from src.etl.types import SnapshotMetadata
from src.settings import settings


class JsonSnapshotLoader(BaseSnapshotLoader):
    """Reads and atomically replaces a JSON snapshot file.

    Concurrent runs against the same file are last-writer-wins.
    """

    name = "json"

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialize JSON loader.

        Args:
            path: Snapshot file path (default from SNAPSHOT_PATH).
        """
        super().__init__()
        self._path = Path(path) if path is not None else settings.storage.snapshot_file
        self._baseline_ids: set[FilmId] = set()

    @property
    def path(self) -> Path:
        """Snapshot file path."""
        return self._path

    def check_storage(self) -> bool:
        """Whether the snapshot directory exists."""
        return self._path.parent.is_dir()

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def read_films(self) -> list[Film]:
        """Read films from the snapshot file.

        Returns:
            Films in file order, empty if the file does not exist.

        Raises:
            SnapshotReadError: If the file is unreadable or malformed.
        """
        document = self._read_document()
        if document is None:
            self._logger.info(f"No snapshot at {self._path}, starting from empty baseline")
            return []

        if "films" not in document:
            raise SnapshotReadError(f"'films' is missing in {self._path}")

        raw_films = document["films"]
        if not isinstance(raw_films, list):
            raise SnapshotReadError(f"'films' is not a list in {self._path}")

        try:
            films = [Film.model_validate(raw) for raw in raw_films]
        except ValidationError as e:
            raise SnapshotReadError(f"Invalid film in {self._path}: {e}") from e

        self._baseline_ids = {film.id for film in films}
        return films

    def read_metadata(self) -> SnapshotMetadata | None:
        """Read the metadata section of the snapshot file.

        Returns:
            Metadata, or None if the file does not exist.

        Raises:
            SnapshotReadError: If the file is unreadable or malformed.
        """
        document = self._read_document()
        if document is None:
            return None

        metadata = document.get("metadata")
        if not isinstance(metadata, dict):
            raise SnapshotReadError(f"'metadata' is missing or invalid in {self._path}")
        return metadata  # type: ignore[return-value]

    def _read_document(self) -> dict[str, Any] | None:
        """Load and parse the snapshot file.

        Returns:
            Parsed document, or None if the file does not exist.

        Raises:
            SnapshotReadError: If reading or parsing fails.
        """
        if not self._path.exists():
            return None

        try:
            with self._path.open(encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotReadError(f"Cannot read snapshot {self._path}: {e}") from e
        except json.JSONDecodeError as e:
            raise SnapshotReadError(f"Corrupt snapshot {self._path}: {e}") from e

        if not isinstance(document, dict):
            raise SnapshotReadError(f"Snapshot root is not an object in {self._path}")
        return document

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def write_snapshot(self, films: Iterable[Film], metadata: SnapshotMetadata) -> None:
        """Write the snapshot through a temporary file and atomic rename.

        Args:
            films: Complete new catalog.
            metadata: Snapshot metadata.

        Raises:
            PersistenceError: If writing or renaming fails.
        """
        film_list = list(films)
        document = {
            "films": [film.to_document() for film in film_list],
            "metadata": metadata,
        }

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._atomic_write(document)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot write snapshot {self._path}: {e}") from e

        new_ids = {film.id for film in film_list}
        self._stats = LoaderStats(
            written=len(film_list),
            deleted=len(self._baseline_ids - new_ids),
        )
        self._baseline_ids = new_ids
        self._log_summary()

    def _atomic_write(self, document: dict[str, Any]) -> None:
        """Dump the document to a sibling temp file, then replace the target."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
