"""
Models for document processing pipeline.

Exports: Chunk, BoundingBox, ChunkMetadata, DiscoveredPdf, ExtractionResult,
PipelineJob, PipelineStatus
"""

from .chunk import DEFAULT_PAGE_HEIGHT, DEFAULT_PAGE_WIDTH, BoundingBox, Chunk, ChunkMetadata
from .discovery import DiscoveredPdf
from .extraction import ExtractionResult
from .pipeline_job import PipelineJob, PipelineStatus, TERMINAL_STATUSES, generate_job_id

__all__ = [
    "DEFAULT_PAGE_HEIGHT",
    "DEFAULT_PAGE_WIDTH",
    "BoundingBox",
    "Chunk",
    "ChunkMetadata",
    "DiscoveredPdf",
    "ExtractionResult",
    "PipelineJob",
    "PipelineStatus",
    "TERMINAL_STATUSES",
    "generate_job_id",
]
