"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite chunk store, chunk/document factories, test settings
Dependencies: pytest, sqlalchemy
System role: Test infrastructure and fixture management
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from zoning_search.boundary.db import Base, StoreConnection
from zoning_search.boundary.vdb import ChunkStore
from zoning_search.configs import Settings
from zoning_search.configs.database import DatabaseSettings
from zoning_search.configs.embedding import EmbeddingSettings
from zoning_search.configs.extraction import ExtractionSettings
from zoning_search.core.document_processing.models import (
    BoundingBox,
    Chunk,
    ChunkMetadata,
    DiscoveredPdf,
)

EIR_URL = "https://sfgov.legistar.com/View.ashx?M=F&ID=1001&GUID=eir.pdf"
STAFF_REPORT_URL = "https://sfgov.legistar.com/View.ashx?M=F&ID=1002&GUID=staff-report.pdf"


@pytest.fixture
def sqlite_engine():
    """
    Create in-memory SQLite database with all tables.

    Yields:
        Engine: Shared-connection engine, disposed after the test
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def store_connection(sqlite_engine) -> StoreConnection:
    return StoreConnection(engine=sqlite_engine)


@pytest.fixture
def chunk_store(store_connection) -> ChunkStore:
    return ChunkStore(store_connection, upsert_batch_size=100, candidate_cap=500)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with dummy credentials and no inter-batch delay."""
    return Settings(
        extraction=ExtractionSettings(api_key="test-reducto-key", retry_base_delay_seconds=0),
        embedding=EmbeddingSettings(
            api_key="test-voyage-key",
            batch_delay_seconds=0,
            retry_base_delay_seconds=0,
        ),
        database=DatabaseSettings(database_url="sqlite:///:memory:"),
    )


@pytest.fixture
def make_chunk():
    """Factory for chunks with sensible defaults."""

    def _make(
        chunk_index: int = 0,
        text: str = "The proposed project would construct a 12-story residential building.",
        source_url: str = EIR_URL,
        file_number: str = "2023-005555ENV",
        page_number: int = 1,
        section: str | None = None,
        table_detected: bool = False,
        embedding: list[float] | None = None,
        bbox: BoundingBox | None = None,
    ) -> Chunk:
        return Chunk(
            text=text,
            page_number=page_number,
            bbox=bbox or BoundingBox(left=72, top=96, width=468, height=120),
            chunk_index=chunk_index,
            file_number=file_number,
            source_url=source_url,
            metadata=ChunkMetadata(section=section, table_detected=table_detected),
            embedding=embedding,
        )

    return _make


@pytest.fixture
def discovered_pdf() -> DiscoveredPdf:
    return DiscoveredPdf(
        url=EIR_URL,
        title="Draft Environmental Impact Report",
        file_number="2023-005555ENV",
        attachment_type="EIR",
        discovered_at=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        metadata={"matter_id": 1001, "matter_title": "469 Stevenson Street Project"},
    )


@pytest.fixture
def fake_response():
    """Factory for requests.Response stand-ins."""

    def _make(status_code: int = 200, payload=None, text: str = "") -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.text = text
        response.json.return_value = payload
        return response

    return _make
