"""SQL database snapshot loader.

Stores one row per film in ``catalog_films`` and the snapshot
metadata in a single ``catalog_metadata`` row. Each write replaces
the whole snapshot in one transaction: removed films are deleted,
the rest are upserted, and the metadata row is replaced.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.database.connection import DatabaseConnection
from src.database.models import CatalogFilm, CatalogMetadata
from src.etl.aggregation.schemas import Film, FilmId
from src.etl.errors import PersistenceError, SnapshotReadError
from src.etl.loaders.base import BaseSnapshotLoader, LoaderStats
from src.etl.types import SnapshotMetadata


class DatabaseSnapshotLoader(BaseSnapshotLoader):
    """Reads and replaces the snapshot stored in a SQL database.

    ``first_seen`` is kept across syncs for films that stay in the
    catalog; ``last_updated`` is refreshed on every write.
    """

    name = "database"

    def __init__(
        self,
        url: str | None = None,
        database: DatabaseConnection | None = None,
    ) -> None:
        """Initialize database loader.

        Args:
            url: SQLAlchemy URL (default from DATABASE_URL).
            database: Existing connection handle to use instead of url.
                The caller keeps ownership of it.
        """
        super().__init__()
        self._url = url
        self._database = database
        self._owns_database = database is None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def open(self) -> None:
        """Create the connection handle and the catalog tables."""
        if self._database is None:
            self._database = DatabaseConnection(self._url)
            self._owns_database = True
        try:
            self._database.create_tables()
        except SQLAlchemyError as e:
            raise SnapshotReadError(f"Cannot initialize catalog tables: {e}") from e

    def close(self) -> None:
        """Dispose the connection handle if this loader created it."""
        if self._database is not None and self._owns_database:
            self._database.dispose()
            self._database = None

    def check_storage(self) -> bool:
        """Whether the database answers, without creating tables."""
        if self._database is not None:
            return self._database.check_connection()

        database = DatabaseConnection(self._url)
        try:
            return database.check_connection()
        finally:
            database.dispose()

    @property
    def database(self) -> DatabaseConnection:
        """Open connection handle."""
        if self._database is None:
            self.open()
        assert self._database is not None
        return self._database

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def read_films(self) -> list[Film]:
        """Read films ordered by snapshot position.

        Returns:
            Films of the stored snapshot, empty if none is stored.

        Raises:
            SnapshotReadError: If the query fails or a row is invalid.
        """
        try:
            with self.database.session() as session:
                rows = session.scalars(select(CatalogFilm).order_by(CatalogFilm.position)).all()
                return [self._row_to_film(row) for row in rows]
        except SQLAlchemyError as e:
            raise SnapshotReadError(f"Cannot read catalog films: {e}") from e
        except ValidationError as e:
            raise SnapshotReadError(f"Invalid film row: {e}") from e

    def read_metadata(self) -> SnapshotMetadata | None:
        """Read the metadata row.

        Returns:
            Metadata document, or None if no snapshot is stored.

        Raises:
            SnapshotReadError: If the query fails.
        """
        try:
            with self.database.session() as session:
                row = session.get(CatalogMetadata, CatalogMetadata.SINGLETON_ID)
                return dict(row.document) if row is not None else None  # type: ignore[return-value]
        except SQLAlchemyError as e:
            raise SnapshotReadError(f"Cannot read catalog metadata: {e}") from e

    def read_first_seen(self) -> dict[FilmId, datetime]:
        """Read when each stored film first entered the snapshot.

        Returns:
            First-seen timestamps keyed by film id.
        """
        try:
            with self.database.session() as session:
                rows = session.execute(select(CatalogFilm.film_key, CatalogFilm.first_seen)).all()
        except SQLAlchemyError as e:
            raise SnapshotReadError(f"Cannot read catalog films: {e}") from e
        return {self._key_to_id(key): first_seen for key, first_seen in rows}

    @staticmethod
    def _row_to_film(row: CatalogFilm) -> Film:
        """Convert an ORM row back into a Film."""
        return Film(
            id=row.film_key,
            title=row.title,
            original_title=row.original_title,
            duration=row.duration,
            genres=list(row.genres or []),
            available_countries=list(row.available_countries or []),
            film_countries=list(row.film_countries or []),
            web_url=row.web_url,
            thumbnail_url=row.thumbnail_url,
            year=row.year,
            directors=list(row.directors or []),
            popularity=row.popularity,
        )

    @staticmethod
    def _key_to_id(key: str) -> FilmId:
        """Restore a film id from its text key."""
        return int(key) if key.isdigit() else key

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def write_snapshot(self, films: Iterable[Film], metadata: SnapshotMetadata) -> None:
        """Replace the stored snapshot in a single transaction.

        Args:
            films: Complete new catalog.
            metadata: Snapshot metadata.

        Raises:
            PersistenceError: If the transaction fails. It is rolled
                back and the previous snapshot stays in place.
        """
        film_list = list(films)
        now = datetime.now(UTC)

        try:
            with self.database.session() as session:
                deleted = self._delete_missing(session, film_list)
                self._upsert_films(session, film_list, now)
                session.merge(
                    CatalogMetadata(id=CatalogMetadata.SINGLETON_ID, document=dict(metadata))
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot write catalog snapshot: {e}") from e

        self._stats = LoaderStats(written=len(film_list), deleted=deleted)
        self._log_summary()

    @staticmethod
    def _delete_missing(session: Session, films: list[Film]) -> int:
        """Delete rows whose film is absent from the new catalog."""
        keep = {str(film.id) for film in films}
        stored = set(session.scalars(select(CatalogFilm.film_key)).all())
        missing = stored - keep
        if missing:
            session.execute(delete(CatalogFilm).where(CatalogFilm.film_key.in_(missing)))
        return len(missing)

    @staticmethod
    def _upsert_films(session: Session, films: list[Film], now: datetime) -> None:
        """Insert new rows and update existing ones, keeping first_seen."""
        existing = {row.film_key: row for row in session.scalars(select(CatalogFilm)).all()}

        for position, film in enumerate(films):
            key = str(film.id)
            row = existing.get(key)
            if row is None:
                row = CatalogFilm(film_key=key, first_seen=now)
                session.add(row)

            row.title = film.title
            row.original_title = film.original_title
            row.duration = film.duration
            row.genres = list(film.genres)
            row.available_countries = list(film.available_countries)
            row.film_countries = list(film.film_countries)
            row.directors = list(film.directors)
            row.web_url = film.web_url
            row.thumbnail_url = film.thumbnail_url
            row.year = film.year
            row.popularity = film.popularity
            row.position = position
            row.last_updated = now
