"""Domain models."""
from .document import (
    Chunk,
    ChunkingOptions,
    IndexingReport,
    RetrievalMode,
    SearchResponse,
    SearchResult,
    SimilarityResult,
    StoreStats,
    VectorEntry,
    VectorMetadata,
    chunk_id,
)
from .chat import ChatAnswer, ChatMessage

__all__ = [
    "Chunk",
    "ChunkingOptions",
    "IndexingReport",
    "RetrievalMode",
    "SearchResponse",
    "SearchResult",
    "SimilarityResult",
    "StoreStats",
    "VectorEntry",
    "VectorMetadata",
    "chunk_id",
    "ChatAnswer",
    "ChatMessage",
]
