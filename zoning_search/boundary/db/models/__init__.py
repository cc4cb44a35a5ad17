"""
Database models package.

Exports:
  - ChunkModel: Stored document chunk

Dependencies: sqlalchemy, zoning_search.boundary.db.base
System role: Database model definitions for domain entities
"""

from zoning_search.boundary.db.models.chunk_model import ChunkModel

__all__ = ["ChunkModel"]
