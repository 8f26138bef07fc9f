"""Vector store protocol for dependency injection."""
from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from ..models.document import (
    Chunk,
    SimilarityResult,
    StoreStats,
    VectorEntry,
    VectorMetadata,
)


@runtime_checkable
class VectorStoreProtocol(Protocol):
    """Protocol for vector storage."""

    def insert(
        self,
        id: str,
        embedding: Sequence[float],
        chunk: Chunk,
        metadata: Optional[VectorMetadata] = None,
    ) -> None:
        """Insert or replace an entry.

        Args:
            id: Entry ID.
            embedding: Chunk embedding.
            chunk: Chunk payload.
            metadata: Entry metadata.
        """
        ...

    def insert_many(self, entries: Iterable[VectorEntry]) -> None:
        """Insert or replace several entries."""
        ...

    def remove_by_id(self, id: str) -> None:
        """Remove an entry, no-op if absent."""
        ...

    def remove_by_file_name(self, file_name: str) -> int:
        """Remove all entries of a file.

        Returns:
            Number of removed entries.
        """
        ...

    def list_by_file_name(self, file_name: str) -> list[VectorEntry]:
        """List entries of a file ordered by chunk index."""
        ...

    def similarity_search(
        self,
        query_embedding: Sequence[float],
        top_k: int = 5,
        threshold: float = 0.7,
        file_name_filter: Optional[str] = None,
    ) -> list[SimilarityResult]:
        """Search by embedding.

        Args:
            query_embedding: Query vector.
            top_k: Max number of results.
            threshold: Minimum cosine similarity.
            file_name_filter: Restrict candidates to one file.

        Returns:
            Results sorted by similarity, highest first.
        """
        ...

    def size(self) -> int:
        """Get entry count."""
        ...

    def list_file_names(self) -> set[str]:
        """Get names of indexed files."""
        ...

    def clear(self) -> None:
        """Remove all entries."""
        ...

    def stats(self) -> StoreStats:
        """Get store statistics."""
        ...
