"""Ingest service - document indexing."""

import logging
from typing import Optional

from ..exceptions import IndexingPartialFailure
from ..models.document import ChunkingOptions, IndexingReport, StoreStats, VectorMetadata
from ..protocols.embedder import EmbedderProtocol
from ..protocols.vector_store import VectorStoreProtocol
from .chunker import Chunker

logger = logging.getLogger(__name__)


class IngestService:
    """Service for indexing documents into vector store."""

    def __init__(
        self,
        embedder: EmbedderProtocol,
        vector_store: VectorStoreProtocol,
        chunker: Optional[Chunker] = None,
        passage_prefix: str = "",
    ):
        """Initialize ingest service.

        Args:
            embedder: Embedding service.
            vector_store: Vector store.
            chunker: Chunker with default chunking options.
            passage_prefix: Text prepended to each chunk before embedding.
        """
        self._embedder = embedder
        self._vector_store = vector_store
        self._chunker = chunker or Chunker()
        self._passage_prefix = passage_prefix

    def index_document(
        self,
        file_name: str,
        content: str,
        options: Optional[ChunkingOptions] = None,
    ) -> IndexingReport:
        """Chunk and embed a document unless it is already indexed.

        A chunk whose embedding fails is logged and left out; the remaining
        chunks are still indexed.

        Args:
            file_name: Document name.
            content: Document text.
            options: Override chunking options.

        Returns:
            Indexing report.
        """
        if self.is_file_indexed(file_name):
            logger.debug(f"Skip indexed: {file_name}")
            return IndexingReport(file_name=file_name, skipped=True)

        logger.info(f"Processing and indexing document: {file_name}")
        chunks = self._chunker.chunk(content, file_name, options)
        report = IndexingReport(file_name=file_name, total_chunks=len(chunks))

        for chunk in chunks:
            try:
                embedding = self._embedder.embed(f"{self._passage_prefix}{chunk.content}")
            except Exception as e:
                logger.error(f"Failed to generate embedding for chunk {chunk.id}: {e}")
                report.failed_chunk_ids.append(chunk.id)
                continue

            self._vector_store.insert(
                chunk.id,
                embedding,
                chunk,
                VectorMetadata(file_name=file_name),
            )
            report.indexed_chunks += 1

        if report.partial_failure:
            report.error = IndexingPartialFailure(
                file_name, report.failed_chunk_ids, report.total_chunks
            )
            logger.warning(str(report.error))

        logger.info(f"Indexed {report.indexed_chunks}/{report.total_chunks} chunks for {file_name}")
        return report

    def reindex_document(
        self,
        file_name: str,
        content: str,
        options: Optional[ChunkingOptions] = None,
    ) -> IndexingReport:
        """Drop stale chunks of a file and index its new content."""
        self.clear_entries_for_file(file_name)
        return self.index_document(file_name, content, options)

    def clear_entries_for_file(self, file_name: str) -> int:
        """Remove all vectors of a file so the next request re-chunks it."""
        removed = self._vector_store.remove_by_file_name(file_name)
        logger.info(f"Cleared embeddings for file: {file_name} ({removed} vectors)")
        return removed

    def clear_all(self) -> None:
        self._vector_store.clear()
        logger.info("Cleared all embeddings from vector store")

    def is_file_indexed(self, file_name: str) -> bool:
        return len(self._vector_store.list_by_file_name(file_name)) > 0

    def list_file_names(self) -> set[str]:
        return self._vector_store.list_file_names()

    def stats(self) -> StoreStats:
        return self._vector_store.stats()

    def indexing_status(self) -> dict:
        """Summary of indexed files for operators."""
        stats = self.stats()
        return {
            "total_indexed_files": stats.total_files,
            "indexed_file_names": stats.file_names,
            "total_chunks": stats.total_vectors,
            "average_chunks_per_file": round(stats.average_chunks_per_file, 2),
        }
