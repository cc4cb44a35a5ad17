"""
Database connection management.

StoreConnection owns one SQLAlchemy engine and its session factory.
The engine is created on first use and released by dispose(), which
the API lifespan calls on shutdown.

Dependencies: sqlalchemy, zoning_search.configs
System role: Database connection lifecycle management
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from zoning_search.boundary.db.base import Base
from zoning_search.configs.database import DatabaseSettings

logger = logging.getLogger(__name__)


def build_engine(settings: DatabaseSettings) -> Engine:
    """
    Create an engine suited to the configured backend.

    SQLite gets a shared connection for in-memory URLs and cross-thread
    access (FastAPI runs sync endpoints in a threadpool). Other backends
    get a pre-pinged QueuePool.
    """
    url = settings.database_url
    if settings.is_sqlite:
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.echo_sql, **kwargs)

    return create_engine(
        url,
        echo=settings.echo_sql,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_pre_ping=True,  # Verify connections before using
    )


class StoreConnection:
    """Lazily created, explicitly disposed engine plus session factory."""

    def __init__(
        self,
        settings: DatabaseSettings | None = None,
        engine: Engine | None = None,
    ) -> None:
        """
        Args:
            settings: Connection settings (defaults from environment)
            engine: Prebuilt engine, used as-is and left to its creator to dispose
        """
        self._settings = settings or DatabaseSettings()
        self._engine = engine
        self._owns_engine = engine is None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self._settings)
            logger.info(
                f"{__name__}:engine - Created engine for {self._engine.url.render_as_string(hide_password=True)}"
            )
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Transactional session scope: commit on success, rollback on error.

        Usage:
            with connection.session() as session:
                session.execute(...)
        """
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
            )
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        """Create all registered tables and indexes (idempotent)."""
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        """Run a trivial query; raises on connection failure."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        """Release pooled connections; the next use creates a fresh engine."""
        if not self._owns_engine:
            return
        if self._engine is not None:
            self._engine.dispose()
            logger.info(f"{__name__}:dispose - Engine disposed")
        self._engine = None
        self._session_factory = None
