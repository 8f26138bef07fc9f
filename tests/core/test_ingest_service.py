"""
Test suite for IngestService.

Covers first-time indexing, skip of indexed files, partial embedding failure,
force re-index, and inspection operations.
"""

import logging

from conftest import FakeEmbedder

from dochive_rag.core.exceptions import IndexingPartialFailure
from dochive_rag.core.models.document import ChunkingOptions
from dochive_rag.core.services.ingest_service import IngestService

DOCUMENT = "Cats are small domestic animals. Dogs are loyal companions. The stock market fell today."


class TestIndexDocument:
    """Test suite for IngestService.index_document."""

    def test_should_embed_and_store_every_chunk(self, ingest_service, store, embedder) -> None:
        report = ingest_service.index_document("pets.txt", DOCUMENT)

        entries = store.list_by_file_name("pets.txt")
        assert report.total_chunks == 3
        assert report.indexed_chunks == 3
        assert report.skipped is False
        assert report.partial_failure is False
        assert [e.id for e in entries] == [f"pets.txt-chunk-{i}" for i in range(3)]
        assert entries[0].chunk.content == "Cats are small domestic animals."
        assert entries[0].metadata.file_name == "pets.txt"
        assert len(embedder.calls) == 3

    def test_should_skip_indexed_file(self, ingest_service, store, embedder) -> None:
        ingest_service.index_document("pets.txt", DOCUMENT)

        report = ingest_service.index_document("pets.txt", "Completely different text.")

        assert report.skipped is True
        assert len(embedder.calls) == 3
        assert store.list_by_file_name("pets.txt")[0].chunk.content.startswith("Cats")

    def test_should_use_options_override(self, ingest_service, store) -> None:
        report = ingest_service.index_document(
            "pets.txt", DOCUMENT, ChunkingOptions(chunk_size=1000, chunk_overlap=0)
        )

        assert report.total_chunks == 1
        assert store.size() == 1

    def test_empty_document_should_index_nothing(self, ingest_service, store) -> None:
        report = ingest_service.index_document("empty.txt", "   ")

        assert report.total_chunks == 0
        assert store.size() == 0
        assert ingest_service.is_file_indexed("empty.txt") is False

    def test_failed_chunk_should_not_abort_indexing(self, store, chunker, caplog) -> None:
        embedder = FakeEmbedder(fail_on={"Dogs"})
        service = IngestService(embedder=embedder, vector_store=store, chunker=chunker)

        with caplog.at_level(logging.WARNING):
            report = service.index_document("pets.txt", DOCUMENT)

        assert report.indexed_chunks == 2
        assert report.failed_chunk_ids == ["pets.txt-chunk-1"]
        assert report.partial_failure is True
        assert isinstance(report.error, IndexingPartialFailure)
        assert report.error.failed_chunk_ids == ["pets.txt-chunk-1"]
        assert [e.chunk.chunk_index for e in store.list_by_file_name("pets.txt")] == [0, 2]
        assert "provider down" in caplog.text
        assert "Indexed 2/3 chunks of 'pets.txt'" in caplog.text


class TestReindex:
    """Test suite for clearing and re-indexing."""

    def test_clear_entries_for_file_should_force_rechunk(self, ingest_service, store) -> None:
        ingest_service.index_document("pets.txt", DOCUMENT)
        ingest_service.index_document("other.txt", "Other file content.")

        removed = ingest_service.clear_entries_for_file("pets.txt")
        report = ingest_service.index_document("pets.txt", "Updated content only.")

        assert removed == 3
        assert report.skipped is False
        assert [e.chunk.content for e in store.list_by_file_name("pets.txt")] == [
            "Updated content only."
        ]
        assert ingest_service.is_file_indexed("other.txt") is True

    def test_reindex_document_should_replace_stale_chunks(self, ingest_service, store) -> None:
        ingest_service.index_document("pets.txt", DOCUMENT)

        report = ingest_service.reindex_document("pets.txt", "Short update.")

        assert report.indexed_chunks == 1
        assert store.size() == 1

    def test_clear_all_should_empty_store(self, ingest_service, store) -> None:
        ingest_service.index_document("pets.txt", DOCUMENT)

        ingest_service.clear_all()

        assert store.size() == 0


class TestInspection:
    """Test suite for inspection operations."""

    def test_is_file_indexed(self, ingest_service) -> None:
        assert ingest_service.is_file_indexed("pets.txt") is False

        ingest_service.index_document("pets.txt", DOCUMENT)

        assert ingest_service.is_file_indexed("pets.txt") is True

    def test_stats_and_file_names(self, ingest_service) -> None:
        ingest_service.index_document("pets.txt", DOCUMENT)
        ingest_service.index_document("a.txt", "Only one sentence.")

        stats = ingest_service.stats()

        assert ingest_service.list_file_names() == {"pets.txt", "a.txt"}
        assert stats.total_vectors == 4
        assert stats.total_files == 2
        assert stats.average_chunks_per_file == 2.0

    def test_indexing_status_should_round_average(self, ingest_service) -> None:
        ingest_service.index_document("pets.txt", DOCUMENT)
        ingest_service.index_document("a.txt", "Only one sentence.")
        ingest_service.index_document("b.txt", "Another single sentence.")

        status = ingest_service.indexing_status()

        assert status == {
            "total_indexed_files": 3,
            "indexed_file_names": ["a.txt", "b.txt", "pets.txt"],
            "total_chunks": 5,
            "average_chunks_per_file": 1.67,
        }


class TestPassagePrefix:
    """Test suite for the chunk embedding prefix."""

    def test_prefix_should_reach_embedder_but_not_stored_chunk(self, embedder, store, chunker) -> None:
        service = IngestService(
            embedder=embedder, vector_store=store, chunker=chunker, passage_prefix="passage: "
        )

        service.index_document("pets.txt", DOCUMENT)

        assert embedder.calls[0] == "passage: Cats are small domestic animals."
        assert all(call.startswith("passage: ") for call in embedder.calls)
        assert store.list_by_file_name("pets.txt")[0].chunk.content == (
            "Cats are small domestic animals."
        )
