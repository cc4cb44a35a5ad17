"""
Vector storage: chunk upsert and similarity search.
"""

from zoning_search.boundary.vdb.chunk_store import ChunkStore
from zoning_search.boundary.vdb.vector_schemas import SearchResult, UpsertResult

__all__ = ["ChunkStore", "SearchResult", "UpsertResult"]
