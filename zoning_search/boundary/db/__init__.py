"""
Database boundary layer: ORM models and connection management.

Exports:
  - Base, TimestampMixin: Model building blocks
  - StoreConnection, build_engine: Engine lifecycle
  - ChunkModel: Stored document chunk

Dependencies: sqlalchemy, zoning_search.configs
System role: Persistent storage for embedded document chunks
"""

from zoning_search.boundary.db.base import Base, TimestampMixin
from zoning_search.boundary.db.connection import StoreConnection, build_engine
from zoning_search.boundary.db.models import ChunkModel

__all__ = [
    "Base",
    "TimestampMixin",
    "StoreConnection",
    "build_engine",
    "ChunkModel",
]
