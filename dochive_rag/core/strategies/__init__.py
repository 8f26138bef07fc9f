"""Chunking strategies."""
from .chunking import (
    ChunkingStrategy,
    FixedSizeChunkingStrategy,
    SentenceChunkingStrategy,
    extract_overlap,
    normalize_newlines,
    split_sentences,
)

__all__ = [
    "ChunkingStrategy",
    "FixedSizeChunkingStrategy",
    "SentenceChunkingStrategy",
    "extract_overlap",
    "normalize_newlines",
    "split_sentences",
]
