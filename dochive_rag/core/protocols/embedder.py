"""Embedder protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for embedding service."""

    def embed(self, text: str) -> list[float]:
        """Encode a single text to an embedding.

        Implementations must return vectors of constant dimensionality for
        the lifetime of a store.

        Args:
            text: Text to encode.

        Returns:
            Embedding vector.
        """
        ...

    def warmup(self) -> None:
        """Pre-load the model for faster inference."""
        ...
