"""
Pipeline orchestrator.

Coordinates discovery, parsing, embedding and storage for a pipeline
run, and embeds queries for search. Collaborators are built from
settings on first use, so a search never needs extraction credentials.

Usage:
    python -m zoning_search.core.document_processing.entrypoint <pdf_url> <file_number>

Dependencies: python-dotenv, all task modules, zoning_search.boundary, zoning_search.configs
System role: Pipeline orchestration (coordinates only)
"""

import argparse
import json
import logging
import sys
import time
from collections.abc import Iterable

from dotenv import load_dotenv

from zoning_search.boundary.clients import (
    LegistarDiscoveryClient,
    ReductoExtractionClient,
    VoyageEmbeddingClient,
)
from zoning_search.boundary.db import StoreConnection
from zoning_search.boundary.vdb import ChunkStore, SearchResult
from zoning_search.configs import Settings, get_settings
from zoning_search.core.exceptions import ExtractionError, ValidationError
from zoning_search.observability import configure_logging
from zoning_search.observability.log_utils import log_exception_with_context

from .models import Chunk, DiscoveredPdf, PipelineJob, PipelineStatus
from .tasks import EmbeddingTask, NormalizingTask, ParsingTask

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Orchestrate zoning document ingestion: discover -> parse -> embed -> upsert."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        discovery_client: LegistarDiscoveryClient | None = None,
        parsing_task: ParsingTask | None = None,
        embedding_client: VoyageEmbeddingClient | None = None,
        embedding_task: EmbeddingTask | None = None,
        chunk_store: ChunkStore | None = None,
        connection: StoreConnection | None = None,
    ) -> None:
        """
        Args:
            settings: Application settings (uses get_settings() if None)
            discovery_client, parsing_task, embedding_client, embedding_task,
            chunk_store, connection: Prebuilt collaborators; built from
                settings on first use when omitted
        """
        self._settings = settings or get_settings()
        self._discovery_client = discovery_client
        self._parsing_task = parsing_task
        self._extraction_client: ReductoExtractionClient | None = None
        self._embedding_client = embedding_client
        self._embedding_task = embedding_task
        self._chunk_store = chunk_store
        self._connection = connection

    @property
    def discovery_client(self) -> LegistarDiscoveryClient:
        if self._discovery_client is None:
            cfg = self._settings.discovery
            self._discovery_client = LegistarDiscoveryClient(
                odata_base=cfg.odata_base,
                matter_scan_limit=cfg.matter_scan_limit,
                default_search_terms=cfg.default_search_terms,
                default_limit=cfg.default_limit,
                timeout_seconds=cfg.timeout_seconds,
                max_retries=cfg.max_retries,
                retry_base_delay_seconds=cfg.retry_base_delay_seconds,
            )
        return self._discovery_client

    @property
    def parsing_task(self) -> ParsingTask:
        """Raises ConfigurationError when REDUCTO_API_KEY is missing."""
        if self._parsing_task is None:
            cfg = self._settings.extraction
            self._extraction_client = ReductoExtractionClient(
                api_key=cfg.api_key,
                api_url=cfg.api_url,
                timeout_seconds=cfg.timeout_seconds,
                max_retries=cfg.max_retries,
                retry_base_delay_seconds=cfg.retry_base_delay_seconds,
            )
            self._parsing_task = ParsingTask(
                self._extraction_client, NormalizingTask(min_paragraph_chars=cfg.min_paragraph_chars)
            )
        return self._parsing_task

    @property
    def embedding_client(self) -> VoyageEmbeddingClient:
        """Raises ConfigurationError when VOYAGE_API_KEY is missing."""
        if self._embedding_client is None:
            cfg = self._settings.embedding
            self._embedding_client = VoyageEmbeddingClient(
                api_key=cfg.api_key,
                api_url=cfg.api_url,
                model=cfg.model,
                dimensions=cfg.dimensions,
                timeout_seconds=cfg.timeout_seconds,
                max_retries=cfg.max_retries,
                retry_base_delay_seconds=cfg.retry_base_delay_seconds,
            )
        return self._embedding_client

    @property
    def embedding_task(self) -> EmbeddingTask:
        if self._embedding_task is None:
            cfg = self._settings.embedding
            self._embedding_task = EmbeddingTask(
                self.embedding_client,
                batch_size=cfg.batch_size,
                batch_delay_seconds=cfg.batch_delay_seconds,
            )
        return self._embedding_task

    @property
    def connection(self) -> StoreConnection:
        if self._connection is None:
            self._connection = StoreConnection(self._settings.database)
        return self._connection

    @property
    def chunk_store(self) -> ChunkStore:
        if self._chunk_store is None:
            cfg = self._settings.database
            self._chunk_store = ChunkStore(
                self.connection,
                upsert_batch_size=cfg.upsert_batch_size,
                candidate_cap=cfg.candidate_cap,
            )
        return self._chunk_store

    def run_pipeline(
        self,
        file_numbers: Iterable[str] | None = None,
        search_terms: Iterable[str] | None = None,
        pdf_limit: int | None = None,
        job: PipelineJob | None = None,
    ) -> PipelineJob:
        """
        Run discovery, parsing, embedding and storage end to end.

        A document that fails extraction is recorded and skipped, and an
        embedding batch that fails is dropped. A discovery or storage
        failure ends the run as FAILED. Failures are reported on the
        returned job, not raised.

        Args:
            file_numbers: Explicit case identifiers to ingest
            search_terms: Discovery terms (defaults to the configured terms)
            pdf_limit: Maximum PDFs to process (defaults to the configured limit)
            job: Job to update in place, so a caller can watch progress

        Returns:
            PipelineJob: Terminal job (COMPLETED or FAILED)

        Raises:
            ConfigurationError: When extraction or embedding credentials are missing
            ValidationError: When pdf_limit is below 1
        """
        defaults = self._settings.pipeline
        terms = [term for term in (search_terms or []) if term] or list(defaults.default_search_terms)
        limit = defaults.default_pdf_limit if pdf_limit is None else pdf_limit
        if limit < 1:
            raise ValidationError("pdf_limit must be at least 1", field="pdf_limit")

        # Resolve credentials before the job starts
        parsing_task = self.parsing_task
        embedding_task = self.embedding_task

        numbers = [number for number in (file_numbers or []) if number]
        job = job or PipelineJob(file_numbers=numbers)
        start_time = time.perf_counter()
        logger.info(
            f"{__name__}:run_pipeline - Starting {job.job_id}",
            extra={"job_id": job.job_id, "file_numbers": numbers, "search_terms": terms, "pdf_limit": limit},
        )

        try:
            job.transition_to(PipelineStatus.DISCOVERING)
            documents = self.discovery_client.discover(
                search_terms=terms, file_numbers=numbers, limit=limit
            )
            job.record_discovered(documents)
            if not documents:
                job.message = "Pipeline complete. No PDFs found to process."
                job.complete()
                return job

            self._ingest(job, documents, parsing_task, embedding_task, skip_failed_documents=True)
        except Exception as e:
            self._fail(job, e)
        finally:
            logger.info(
                f"{__name__}:run_pipeline - {job.job_id} finished as {job.status.value}",
                extra={
                    "job_id": job.job_id,
                    "discovered_pdfs": job.discovered_pdfs,
                    "parsed_chunks": job.parsed_chunks,
                    "embedded_chunks": job.embedded_chunks,
                    "upserted_chunks": job.upserted_chunks,
                    "processing_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
            )
        return job

    def process_document(
        self,
        url: str,
        file_number: str,
        title: str = "",
        job: PipelineJob | None = None,
    ) -> PipelineJob:
        """
        Ingest one known PDF, bypassing discovery.

        Unlike run_pipeline, an extraction failure fails the job.

        Raises:
            ConfigurationError: When extraction or embedding credentials are missing
            ValidationError: When url or file_number is empty
        """
        if not url or not url.strip():
            raise ValidationError("url is required", field="url")
        if not file_number or not file_number.strip():
            raise ValidationError("file_number is required", field="file_number")

        parsing_task = self.parsing_task
        embedding_task = self.embedding_task

        document = DiscoveredPdf(url=url.strip(), title=title, file_number=file_number.strip())
        job = job or PipelineJob(file_numbers=[document.file_number])
        job.record_discovered([document])
        try:
            self._ingest(job, [document], parsing_task, embedding_task, skip_failed_documents=False)
        except Exception as e:
            self._fail(job, e)
        return job

    def search(
        self,
        query: str,
        file_numbers: Iterable[str] | None = None,
        limit: int | None = None,
        min_score: float | None = None,
    ) -> list[SearchResult]:
        """
        Embed a query and rank stored chunks against it.

        Raises:
            ValidationError: When the query is empty or limit is below 1
            ConfigurationError: When embedding credentials are missing
            EmbeddingError: When the query cannot be embedded
            VectorStoreError: When the store query fails
        """
        if not query or not query.strip():
            raise ValidationError("query is required for search", field="query")

        defaults = self._settings.pipeline
        limit = defaults.default_search_limit if limit is None else limit
        min_score = defaults.default_min_score if min_score is None else min_score
        if limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")

        query_vector = self.embedding_client.embed_query(query.strip())
        return self.chunk_store.search(
            query_vector, file_numbers=file_numbers, limit=limit, min_score=min_score
        )

    def close(self) -> None:
        """Release HTTP sessions and database connections this orchestrator created."""
        if self._discovery_client is not None:
            self._discovery_client.close()
        if self._extraction_client is not None:
            self._extraction_client.close()
        if self._embedding_client is not None:
            self._embedding_client.close()
        if self._connection is not None:
            self._connection.dispose()

    def _ingest(
        self,
        job: PipelineJob,
        documents: list[DiscoveredPdf],
        parsing_task: ParsingTask,
        embedding_task: EmbeddingTask,
        skip_failed_documents: bool,
    ) -> None:
        job.transition_to(PipelineStatus.PARSING)
        chunks: list[Chunk] = []
        for document in documents:
            try:
                result = parsing_task.parse(document)
            except ExtractionError as e:
                if not skip_failed_documents:
                    raise
                log_exception_with_context(
                    logger,
                    f"{__name__}:_ingest - Skipping document after extraction failure",
                    e,
                    level=logging.WARNING,
                    job_id=job.job_id,
                    source_url=document.url,
                )
                job.failed_documents.append(document.url)
                continue
            chunks.extend(result.chunks)
            job.add_parsed(len(result.chunks))

        if not chunks:
            job.message = "Pipeline complete. No chunks extracted from PDFs."
            job.complete()
            return

        job.transition_to(PipelineStatus.EMBEDDING)
        outcome = embedding_task.embed(chunks, on_group=lambda group: job.add_embedded(len(group.chunks)))

        job.transition_to(PipelineStatus.UPSERTING)
        self.chunk_store.upsert(outcome.chunks, on_batch=lambda batch: job.add_upserted(batch.total))

        job.message = (
            f"Pipeline complete! Processed {job.discovered_pdfs} PDFs, "
            f"{job.upserted_chunks} chunks stored."
        )
        job.complete()

    @staticmethod
    def _fail(job: PipelineJob, exc: Exception) -> None:
        log_exception_with_context(
            logger,
            f"{__name__}:run - {job.job_id} failed during {job.status.value}",
            exc,
            job_id=job.job_id,
        )
        message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
        if not job.is_terminal:
            job.fail(message)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ingest a single zoning PDF into the chunk store")
    parser.add_argument("url", help="Public URL of the PDF")
    parser.add_argument("file_number", help="Case identifier the PDF belongs to")
    parser.add_argument("--title", default="", help="Document title stored with each chunk")
    args = parser.parse_args(argv)

    load_dotenv()
    settings = get_settings()
    configure_logging(settings.log_level)

    orchestrator = PipelineOrchestrator(settings)
    try:
        orchestrator.connection.create_tables()
        job = orchestrator.process_document(args.url, args.file_number, title=args.title)
        summary = job.model_dump(mode="json", exclude={"discovered"})
        summary["stored_chunks_for_file"] = orchestrator.chunk_store.count_by_file_number(
            args.file_number
        )
        print(json.dumps(summary, indent=2))
    finally:
        orchestrator.close()
    return 0 if job.status == PipelineStatus.COMPLETED else 1


if __name__ == "__main__":
    sys.exit(main())
