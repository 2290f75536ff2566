"""Database connection handle with SQLAlchemy 2.0.

Provides an explicitly constructed engine and transactional
session scope. No module-level connection state: callers create a
handle, pass it where needed, and dispose it when done.
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.database.models import Base
from src.settings import settings


class DatabaseConnection:
    """Owns one SQLAlchemy engine and its session factory.

    Example:
        ```python
        db = DatabaseConnection("sqlite:///data/catalog.db")
        db.create_tables()
        with db.session() as session:
            session.execute(text("SELECT 1"))
        db.dispose()
        ```
    """

    def __init__(self, url: str | None = None, echo: bool | None = None) -> None:
        """Create the engine and session factory.

        Args:
            url: SQLAlchemy URL (default from DATABASE_URL).
            echo: Log SQL statements (default from DATABASE_ECHO).
        """
        self._url = url or settings.storage.url
        self._engine = create_engine(
            self._url,
            pool_pre_ping=True,
            echo=settings.storage.echo if echo is None else echo,
        )
        self._session_factory = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @property
    def url(self) -> str:
        """Database URL."""
        return self._url

    @property
    def engine(self) -> Engine:
        """Get the underlying engine."""
        return self._engine

    def create_tables(self) -> None:
        """Create catalog tables if they don't exist."""
        Base.metadata.create_all(self._engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Open a session wrapped in one transaction.

        The transaction commits when the block exits normally and
        rolls back when it raises; the session is closed either way.

        Yields:
            SQLAlchemy Session bound to this engine.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def check_connection(self) -> bool:
        """Whether the database answers a trivial query."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()
