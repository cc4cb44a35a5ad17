"""
Extraction response normalization.

Converts the layout-aware parse API's response, in any of its known
shapes, into an ordered list of positioned chunks. The shape is
detected once, in priority order, and exactly one builder runs:

    1. NESTED_CHUNKS  chunks that carry geometric blocks
    2. BLOCKS         a flat list of geometric blocks
    3. FLAT_CHUNKS    chunks with content/text but no geometry
    4. TEXT           one markdown or plain-text string

Unrecognized payloads yield no chunks and a warning, never an error.

Dependencies: zoning_search.core.document_processing.heuristics
System role: Second half of the parse stage (payload -> chunks)
"""

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from ..heuristics import clean_text, detect_section, detect_table
from ..models import BoundingBox, Chunk, ChunkMetadata, DiscoveredPdf, ExtractionResult

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n\n+")


class ResponseShape(str, Enum):
    """Known parse API response layouts."""

    NESTED_CHUNKS = "nested_chunks"
    BLOCKS = "blocks"
    FLAT_CHUNKS = "flat_chunks"
    TEXT = "text"


@dataclass(frozen=True)
class ShapeMatch:
    """Detected response shape plus the part of the payload it applies to."""

    shape: ResponseShape
    data: Any


@dataclass(frozen=True)
class _Draft:
    raw_text: str
    page_number: int
    bbox: BoundingBox
    is_table_block: bool = False


def _result(payload: dict) -> dict:
    result = payload.get("result")
    return result if isinstance(result, dict) else {}


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _detect_nested_chunks(payload: dict) -> ShapeMatch | None:
    chunks = _result(payload).get("chunks")
    if _non_empty_list(chunks):
        return ShapeMatch(ResponseShape.NESTED_CHUNKS, chunks)
    top_level = payload.get("chunks")
    if _non_empty_list(top_level) and any(
        isinstance(chunk, dict) and _non_empty_list(chunk.get("blocks")) for chunk in top_level
    ):
        return ShapeMatch(ResponseShape.NESTED_CHUNKS, top_level)
    return None


def _detect_blocks(payload: dict) -> ShapeMatch | None:
    for blocks in (_result(payload).get("blocks"), payload.get("blocks")):
        if _non_empty_list(blocks):
            return ShapeMatch(ResponseShape.BLOCKS, blocks)
    return None


def _detect_flat_chunks(payload: dict) -> ShapeMatch | None:
    chunks = payload.get("chunks")
    if _non_empty_list(chunks):
        return ShapeMatch(ResponseShape.FLAT_CHUNKS, chunks)
    return None


def _detect_text(payload: dict) -> ShapeMatch | None:
    result = _result(payload)
    for candidate in (
        result.get("markdown"),
        result.get("text"),
        payload.get("markdown"),
        payload.get("text"),
    ):
        if isinstance(candidate, str) and candidate.strip():
            return ShapeMatch(ResponseShape.TEXT, candidate)
    return None


SHAPE_DETECTORS: tuple[Callable[[dict], ShapeMatch | None], ...] = (
    _detect_nested_chunks,
    _detect_blocks,
    _detect_flat_chunks,
    _detect_text,
)


def _reported_pages(payload: Any) -> Any:
    usage = payload.get("usage") if isinstance(payload, dict) else None
    if not isinstance(usage, dict):
        return None
    return usage.get("num_pages") or usage.get("pages_processed")


def _coerce_number(value: Any, default: float) -> float:
    # Missing, zero and non-numeric values all fall back to the default.
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _coerce_page(value: Any) -> int:
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


def _draft_from_block(block: Any) -> _Draft:
    if not isinstance(block, dict):
        return _Draft(str(block or ""), 1, BoundingBox.full_page())

    bbox_data = block.get("bbox")
    if isinstance(bbox_data, dict):
        default = BoundingBox.full_page()
        bbox = BoundingBox(
            left=_coerce_number(bbox_data.get("left"), default.left),
            top=_coerce_number(bbox_data.get("top"), default.top),
            width=_coerce_number(bbox_data.get("width"), default.width),
            height=_coerce_number(bbox_data.get("height"), default.height),
        )
        page = _coerce_page(bbox_data.get("page"))
    else:
        bbox = BoundingBox.full_page()
        page = _coerce_page(block.get("page"))

    content = block.get("content") or block.get("text") or ""
    return _Draft(
        raw_text=str(content),
        page_number=page,
        bbox=bbox,
        is_table_block=str(block.get("type", "")).lower() == "table",
    )


def _draft_from_text(text: str) -> _Draft:
    return _Draft(text, 1, BoundingBox.full_page())


def _item_text(item: dict) -> str:
    return str(item.get("content") or item.get("text") or json.dumps(item))


class NormalizingTask:
    """Turn parse API responses into positioned, labeled chunks."""

    def __init__(self, min_paragraph_chars: int = 10) -> None:
        """
        Args:
            min_paragraph_chars: Plain-text paragraphs must be longer than this
        """
        self._min_paragraph_chars = min_paragraph_chars
        self._builders: dict[ResponseShape, Callable[[Any], list[_Draft]]] = {
            ResponseShape.NESTED_CHUNKS: self._build_nested_chunks,
            ResponseShape.BLOCKS: self._build_blocks,
            ResponseShape.FLAT_CHUNKS: self._build_flat_chunks,
            ResponseShape.TEXT: self._build_text,
        }

    @staticmethod
    def detect_shape(payload: Any) -> ShapeMatch | None:
        """Return the highest-priority shape the payload matches, if any."""
        if not isinstance(payload, dict):
            return None
        for detector in SHAPE_DETECTORS:
            match = detector(payload)
            if match is not None:
                return match
        return None

    def normalize(
        self,
        payload: Any,
        document: DiscoveredPdf,
        parsed_at: datetime | None = None,
    ) -> ExtractionResult:
        """
        Normalize one parse response.

        Blocks whose cleaned text is empty are skipped without consuming
        a chunk index, so indices are always contiguous from 0.

        Args:
            payload: Raw parse API response
            document: The document the response belongs to
            parsed_at: Parse timestamp (defaults to now)

        Returns:
            ExtractionResult: Chunks in document order
        """
        parsed_at = parsed_at or datetime.now(timezone.utc)
        match = self.detect_shape(payload)
        if match is None:
            logger.warning(
                f"{__name__}:normalize - No recognized data format in parse response",
                extra={
                    "source_url": document.url,
                    "payload_keys": sorted(payload)[:20] if isinstance(payload, dict) else None,
                },
            )
            return ExtractionResult(
                source_url=document.url,
                file_number=document.file_number,
                total_pages=ExtractionResult.count_pages([], _reported_pages(payload)),
                parsed_at=parsed_at,
            )

        drafts = self._builders[match.shape](match.data)
        chunks: list[Chunk] = []
        for draft in drafts:
            text = clean_text(draft.raw_text)
            if not text:
                continue
            chunks.append(
                Chunk(
                    text=text,
                    page_number=draft.page_number,
                    bbox=draft.bbox,
                    chunk_index=len(chunks),
                    file_number=document.file_number,
                    source_url=document.url,
                    metadata=ChunkMetadata(
                        section=detect_section(draft.raw_text),
                        table_detected=draft.is_table_block or detect_table(draft.raw_text),
                        document_title=document.title or None,
                        attachment_type=document.attachment_type,
                        discovered_at=document.discovered_at,
                        parsed_at=parsed_at,
                    ),
                )
            )

        logger.debug(
            f"{__name__}:normalize - Normalized {len(chunks)} chunks",
            extra={"source_url": document.url, "shape": match.shape.value},
        )
        return ExtractionResult(
            source_url=document.url,
            file_number=document.file_number,
            total_pages=ExtractionResult.count_pages(chunks, _reported_pages(payload)),
            chunks=chunks,
            parsed_at=parsed_at,
        )

    def _build_nested_chunks(self, items: list) -> list[_Draft]:
        drafts: list[_Draft] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            blocks = item.get("blocks")
            if _non_empty_list(blocks):
                drafts.extend(_draft_from_block(block) for block in blocks)
            else:
                drafts.append(_draft_from_text(_item_text(item)))
        return drafts

    def _build_blocks(self, blocks: list) -> list[_Draft]:
        return [_draft_from_block(block) for block in blocks]

    def _build_flat_chunks(self, items: list) -> list[_Draft]:
        drafts = []
        for item in items:
            text = _item_text(item) if isinstance(item, dict) else str(item)
            drafts.append(_draft_from_text(text))
        return drafts

    def _build_text(self, text: str) -> list[_Draft]:
        return [
            _draft_from_text(paragraph)
            for paragraph in _PARAGRAPH_BREAK.split(text)
            if len(paragraph.strip()) > self._min_paragraph_chars
        ]
