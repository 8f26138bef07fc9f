
import re
from abc import ABC, abstractmethod

from ..models.document import Chunk, ChunkingOptions, chunk_id


_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_WHITESPACE = re.compile(r"\s")


def normalize_newlines(text: str) -> str:
    """Convert ``\\r\\n`` and ``\\r`` line endings to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_sentences(text: str) -> list[tuple[int, int]]:
    """Split text on whitespace following ``.``, ``!`` or ``?``.

    Returns:
        Non-empty (start, end) spans into ``text``.
    """
    spans = []
    start = 0
    for match in _SENTENCE_BOUNDARY.finditer(text):
        spans.append((start, match.start()))
        start = match.end()
    spans.append((start, len(text)))
    return [(s, e) for s, e in spans if s < e]


def overlap_start(text: str, overlap_size: int) -> int:
    """Index in ``text`` where the overlap carried into the next chunk begins.

    The trailing ``overlap_size`` characters are trimmed forward past the first
    whitespace so the overlap starts on a whole word. Without whitespace in the
    slice the raw slice is used.
    """
    if overlap_size <= 0:
        return len(text)

    if len(text) <= overlap_size:
        pos = 0
    else:
        pos = len(text) - overlap_size
        match = _WHITESPACE.search(text, pos)
        if match:
            pos = match.end()

    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def extract_overlap(text: str, overlap_size: int) -> str:
    """Overlap text taken from the tail of a closed chunk."""
    return text[overlap_start(text, overlap_size):]


class _SentenceBuffer:
    """Running chunk text with a map back to source offsets.

    Segments are (buffer offset, source offset, length) runs of text copied
    verbatim from the source; gaps between them are join spaces.
    """

    def __init__(self) -> None:
        self.text = ""
        self._segments: list[tuple[int, int, int]] = []

    def __bool__(self) -> bool:
        return bool(self.text.strip())

    def projected_length(self, sentence: str) -> int:
        return len(self.text) + (1 if self.text else 0) + len(sentence)

    def append(self, sentence: str, source_start: int) -> None:
        if self.text:
            self.text += " "
        self._segments.append((len(self.text), source_start, len(sentence)))
        self.text += sentence

    def tail(self, start: int) -> "_SentenceBuffer":
        """New buffer holding ``self.text[start:]`` with its segments rebased."""
        buffer = _SentenceBuffer()
        buffer.text = self.text[start:]
        for buf_pos, src_pos, length in self._segments:
            if buf_pos + length <= start:
                continue
            cut = max(start - buf_pos, 0)
            buffer._segments.append((buf_pos + cut - start, src_pos + cut, length - cut))
        return buffer

    def _to_source(self, pos: int) -> int:
        for buf_pos, src_pos, length in self._segments:
            if buf_pos <= pos < buf_pos + length:
                return src_pos + pos - buf_pos
        # join spaces are whitespace and never the first/last content char
        raise ValueError(f"Buffer position {pos} is not backed by source text")

    def source_span(self) -> tuple[int, int]:
        """Source offsets of the first and last content characters."""
        first = len(self.text) - len(self.text.lstrip())
        last = len(self.text.rstrip()) - 1
        return self._to_source(first), self._to_source(last) + 1


class ChunkingStrategy(ABC):
    """Base class for chunking strategies."""

    def __init__(self, options: ChunkingOptions):
        self._options = options

    @abstractmethod
    def split(self, text: str, file_name: str) -> list[Chunk]:
        """Split normalized, non-empty text into chunks."""
        ...


class SentenceChunkingStrategy(ChunkingStrategy):
    """Greedy sentence packing with word-aligned overlap.

    A sentence is never split; one longer than ``chunk_size`` gets a chunk of
    its own. The overlap is shrunk when overlap plus the next sentence would
    not fit in ``chunk_size``.
    """

    def split(self, text: str, file_name: str) -> list[Chunk]:
        chunk_size = self._options.chunk_size
        chunks: list[Chunk] = []
        buffer = _SentenceBuffer()

        for start, end in split_sentences(text):
            sentence = text[start:end]

            if buffer and buffer.projected_length(sentence) > chunk_size:
                chunks.append(self._emit(buffer, file_name, len(chunks)))

                budget = min(self._options.chunk_overlap, chunk_size - len(sentence) - 1)
                buffer = buffer.tail(overlap_start(buffer.text, budget))
                if not buffer:
                    buffer = _SentenceBuffer()

            buffer.append(sentence, start)

        if buffer:
            chunks.append(self._emit(buffer, file_name, len(chunks)))

        return chunks

    def _emit(self, buffer: _SentenceBuffer, file_name: str, index: int) -> Chunk:
        start_char, end_char = buffer.source_span()
        return Chunk(
            id=chunk_id(file_name, index),
            content=buffer.text.strip(),
            file_name=file_name,
            chunk_index=index,
            start_char=start_char,
            end_char=end_char,
        )


class FixedSizeChunkingStrategy(ChunkingStrategy):
    """Sliding character window of ``chunk_size`` advancing by ``step``."""

    def split(self, text: str, file_name: str) -> list[Chunk]:
        chunk_size = self._options.chunk_size
        chunks: list[Chunk] = []

        for start in range(0, len(text), self._options.step):
            end = min(start + chunk_size, len(text))
            window = text[start:end]
            content = window.strip()

            if content:
                content_start = start + len(window) - len(window.lstrip())
                index = len(chunks)
                chunks.append(
                    Chunk(
                        id=chunk_id(file_name, index),
                        content=content,
                        file_name=file_name,
                        chunk_index=index,
                        start_char=content_start,
                        end_char=content_start + len(content),
                    )
                )

            if end >= len(text):
                break

        return chunks
