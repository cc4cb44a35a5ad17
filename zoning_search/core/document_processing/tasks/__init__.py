"""
Task modules for document processing pipeline.

Exports: NormalizingTask, ParsingTask, EmbeddingTask
"""

from .embedding_task import EmbeddedGroup, EmbeddingOutcome, EmbeddingTask, build_embedding_text
from .normalizing_task import NormalizingTask, ResponseShape, ShapeMatch
from .parsing_task import ParsingTask

__all__ = [
    "EmbeddedGroup",
    "EmbeddingOutcome",
    "EmbeddingTask",
    "NormalizingTask",
    "ParsingTask",
    "ResponseShape",
    "ShapeMatch",
    "build_embedding_text",
]
