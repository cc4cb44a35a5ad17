"""
Document processing pipeline.

discover -> parse -> normalize -> embed -> quantize/upsert, coordinated
by PipelineOrchestrator in ``entrypoint``.
"""

from .models import Chunk, DiscoveredPdf, ExtractionResult, PipelineJob, PipelineStatus

__all__ = ["Chunk", "DiscoveredPdf", "ExtractionResult", "PipelineJob", "PipelineStatus"]
