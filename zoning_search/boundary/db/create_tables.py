"""
Database table creation script.

Creates the chunk table with its unique (source_url, chunk_index)
constraint and file_number index.

Usage:
    python -m zoning_search.boundary.db.create_tables
    python -m zoning_search.boundary.db.create_tables --drop   # development only
"""

import argparse
import logging

from zoning_search.boundary.db.base import Base
from zoning_search.boundary.db.connection import StoreConnection

# Import all models to register them with Base.metadata
from zoning_search.boundary.db.models.chunk_model import ChunkModel  # noqa: F401
from zoning_search.configs import get_settings
from zoning_search.observability import configure_logging

logger = logging.getLogger(__name__)


def create_all_tables(connection: StoreConnection | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.
    """
    connection = connection or StoreConnection(get_settings().database)
    Base.metadata.create_all(bind=connection.engine)
    logger.info(f"{__name__}:create_all_tables - Tables created: {sorted(Base.metadata.tables)}")


def drop_all_tables(connection: StoreConnection | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    connection = connection or StoreConnection(get_settings().database)
    Base.metadata.drop_all(bind=connection.engine)
    logger.info(f"{__name__}:drop_all_tables - All tables dropped")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the zoning chunk store schema")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    connection = StoreConnection(settings.database)
    try:
        if args.drop:
            drop_all_tables(connection)
        create_all_tables(connection)
    finally:
        connection.dispose()


if __name__ == "__main__":
    main()
