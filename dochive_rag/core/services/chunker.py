"""Chunker - splits document text into overlapping chunks."""

import logging
from typing import Optional

from ..models.document import Chunk, ChunkingOptions
from ..strategies.chunking import (
    ChunkingStrategy,
    FixedSizeChunkingStrategy,
    SentenceChunkingStrategy,
    normalize_newlines,
)

logger = logging.getLogger(__name__)


class Chunker:
    """Splits raw text into ordered chunks of bounded size."""

    def __init__(self, options: Optional[ChunkingOptions] = None):
        """Initialize chunker.

        Args:
            options: Default chunking options.
        """
        self._options = options or ChunkingOptions()

    @property
    def options(self) -> ChunkingOptions:
        return self._options

    def _strategy(self, options: ChunkingOptions) -> ChunkingStrategy:
        if options.preserve_sentences:
            return SentenceChunkingStrategy(options)
        return FixedSizeChunkingStrategy(options)

    def chunk(
        self,
        content: str,
        file_name: str,
        options: Optional[ChunkingOptions] = None,
    ) -> list[Chunk]:
        """Split document text into chunks.

        Args:
            content: Raw document text.
            file_name: Owning document name, used for chunk IDs.
            options: Override default options.

        Returns:
            Chunks ordered by chunk index; empty for blank content.
        """
        options = options or self._options

        if not content or not content.strip():
            return []

        text = normalize_newlines(content)
        chunks = self._strategy(options).split(text, file_name)

        logger.debug(
            f"Chunked {file_name}: {len(chunks)} chunks "
            f"(size={options.chunk_size}, overlap={options.chunk_overlap}, "
            f"sentences={options.preserve_sentences})"
        )
        return chunks
