"""Document domain models."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import numpy as np

from ..exceptions import ConfigurationError, IndexingPartialFailure


def chunk_id(file_name: str, chunk_index: int) -> str:
    """Build the deterministic id of a chunk."""
    return f"{file_name}-chunk-{chunk_index}"


@dataclass(frozen=True)
class ChunkingOptions:
    """Chunking parameters."""
    chunk_size: int = 1000
    chunk_overlap: int = 200
    preserve_sentences: bool = True

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ConfigurationError(
                "chunk_size must be positive", {"chunk_size": self.chunk_size}
            )
        if self.chunk_overlap < 0:
            raise ConfigurationError(
                "chunk_overlap must not be negative",
                {"chunk_overlap": self.chunk_overlap},
            )
        if self.chunk_overlap >= self.chunk_size:
            raise ConfigurationError(
                "chunk_overlap must be smaller than chunk_size",
                {"chunk_size": self.chunk_size, "chunk_overlap": self.chunk_overlap},
            )

    @property
    def step(self) -> int:
        """Window advance in fixed-size mode."""
        return self.chunk_size - self.chunk_overlap


@dataclass(frozen=True)
class Chunk:
    """Document chunk for indexing.

    ``start_char``/``end_char`` point into the newline-normalized source text.
    """
    id: str
    content: str
    file_name: str
    chunk_index: int
    start_char: int
    end_char: int


@dataclass(frozen=True)
class VectorMetadata:
    """Informational metadata stored next to an embedding."""
    file_name: str
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class VectorEntry:
    """Chunk paired with its embedding."""
    id: str
    embedding: np.ndarray
    chunk: Chunk
    metadata: VectorMetadata

    @property
    def file_name(self) -> str:
        return self.chunk.file_name

    @property
    def dimension(self) -> int:
        return int(self.embedding.shape[0])


@dataclass(frozen=True)
class SimilarityResult:
    """Vector store hit."""
    entry: VectorEntry
    similarity: float


@dataclass(frozen=True)
class StoreStats:
    """Vector store bookkeeping."""
    total_vectors: int
    total_files: int
    file_names: list[str]
    average_chunks_per_file: float


@dataclass
class IndexingReport:
    """Outcome of indexing one document."""
    file_name: str
    total_chunks: int = 0
    indexed_chunks: int = 0
    failed_chunk_ids: list[str] = field(default_factory=list)
    skipped: bool = False
    error: Optional[IndexingPartialFailure] = None

    @property
    def partial_failure(self) -> bool:
        return bool(self.failed_chunk_ids)


class RetrievalMode(Enum):
    """How the context of a search response was selected."""
    RANKED = "ranked"                    # primary threshold
    RANKED_FALLBACK = "ranked_fallback"  # lowered threshold
    UNRANKED = "unranked"                # first chunks in document order


@dataclass
class SearchResult:
    """Chunk selected for the context."""
    chunk: Chunk
    score: Optional[float] = None

    @property
    def content(self) -> str:
        return self.chunk.content


@dataclass
class SearchResponse:
    """Search response for the chat layer."""
    mode: RetrievalMode
    results: list[SearchResult]
    context: str

    @property
    def is_ranked(self) -> bool:
        return self.mode is not RetrievalMode.UNRANKED

    @property
    def sources(self) -> list[str]:
        """Chunk ids in context order."""
        return [r.chunk.id for r in self.results]
