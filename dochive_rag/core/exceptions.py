"""Exception hierarchy for the RAG core.

Every error carries a human-readable message plus an optional ``details``
mapping with context for logging.
"""

from typing import Any


class RAGError(Exception):
    """Base exception for all RAG errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize base exception.

        Args:
            message: Human-readable error message.
            details: Optional additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(RAGError):
    """Raised when chunking parameters are invalid."""


class DimensionMismatchError(RAGError):
    """Raised when a query embedding and a stored embedding differ in length."""

    def __init__(self, expected: int, actual: int, entry_id: str) -> None:
        self.expected = expected
        self.actual = actual
        self.entry_id = entry_id
        super().__init__(
            f"Embedding dimension mismatch: query has {expected}, "
            f"entry '{entry_id}' has {actual}",
            {"expected": expected, "actual": actual, "entry_id": entry_id},
        )


class EmbeddingFailedError(RAGError):
    """Raised when the embedding provider fails."""


class QueryEmbeddingFailedError(EmbeddingFailedError):
    """Raised when the query itself cannot be embedded."""


class GenerationFailedError(RAGError):
    """Raised when the generation provider fails."""


class IndexingPartialFailure(RAGError):
    """Some chunks of a document could not be embedded.

    Non-fatal: built and logged by the ingest service, never raised.
    """

    def __init__(self, file_name: str, failed_chunk_ids: list[str], total: int) -> None:
        self.file_name = file_name
        self.failed_chunk_ids = list(failed_chunk_ids)
        self.total = total
        super().__init__(
            f"Indexed {total - len(failed_chunk_ids)}/{total} chunks of '{file_name}'",
            {"failed_chunk_ids": self.failed_chunk_ids},
        )
