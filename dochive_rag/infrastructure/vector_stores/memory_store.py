import logging
import threading
from typing import Iterable, Optional, Sequence

import numpy as np

from dochive_rag.core.exceptions import DimensionMismatchError
from dochive_rag.core.models.document import (
    Chunk,
    SimilarityResult,
    StoreStats,
    VectorEntry,
    VectorMetadata,
)

logger = logging.getLogger(__name__)


def _as_vector(values: Sequence[float]) -> np.ndarray:
    vector = np.array(values, dtype=np.float64).reshape(-1)
    vector.setflags(write=False)
    return vector


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity of two equal-length vectors, 0.0 if either norm is zero."""
    norm = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if norm == 0.0:
        return 0.0
    return float(np.clip(np.dot(a, b) / norm, -1.0, 1.0))


class InMemoryVectorStore:
    """Process-local vector store with exact cosine search.

    Mutations hold the lock for their whole duration. Reads copy the entry
    list under the lock and score outside it; entries are immutable.
    """

    def __init__(self):
        self._entries: dict[str, VectorEntry] = {}
        self._lock = threading.RLock()

    def insert(
        self,
        id: str,
        embedding: Sequence[float],
        chunk: Chunk,
        metadata: Optional[VectorMetadata] = None,
    ) -> None:
        """Insert or replace entry."""
        entry = VectorEntry(
            id=id,
            embedding=_as_vector(embedding),
            chunk=chunk,
            metadata=metadata or VectorMetadata(file_name=chunk.file_name),
        )
        with self._lock:
            self._entries[id] = entry

    def insert_many(self, entries: Iterable[VectorEntry]) -> None:
        """Insert or replace entries one by one."""
        for entry in entries:
            self.insert(entry.id, entry.embedding, entry.chunk, entry.metadata)

    def remove_by_id(self, id: str) -> None:
        with self._lock:
            self._entries.pop(id, None)

    def remove_by_file_name(self, file_name: str) -> int:
        """Remove all entries of a file."""
        with self._lock:
            ids = [i for i, e in self._entries.items() if e.file_name == file_name]
            for id in ids:
                del self._entries[id]

        if ids:
            logger.debug(f"Removed {len(ids)} vectors of {file_name}")
        return len(ids)

    def _snapshot(self) -> list[VectorEntry]:
        with self._lock:
            return list(self._entries.values())

    def list_by_file_name(self, file_name: str) -> list[VectorEntry]:
        """Get entries of a file ordered by chunk index."""
        entries = [e for e in self._snapshot() if e.file_name == file_name]
        return sorted(entries, key=lambda e: e.chunk.chunk_index)

    def similarity_search(
        self,
        query_embedding: Sequence[float],
        top_k: int = 5,
        threshold: float = 0.7,
        file_name_filter: Optional[str] = None,
    ) -> list[SimilarityResult]:
        """Rank entries by cosine similarity to the query.

        Raises:
            DimensionMismatchError: A candidate embedding differs in length.
        """
        if top_k <= 0:
            return []

        query = _as_vector(query_embedding)
        results = []

        for entry in self._snapshot():
            if file_name_filter is not None and entry.file_name != file_name_filter:
                continue

            if entry.dimension != query.shape[0]:
                raise DimensionMismatchError(
                    expected=int(query.shape[0]), actual=entry.dimension, entry_id=entry.id
                )

            similarity = cosine_similarity(query, entry.embedding)
            if similarity >= threshold:
                results.append(SimilarityResult(entry=entry, similarity=similarity))

        results.sort(
            key=lambda r: (
                -r.similarity,
                r.entry.file_name,
                r.entry.chunk.chunk_index,
                r.entry.id,
            )
        )
        return results[:top_k]

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def list_file_names(self) -> set[str]:
        return {e.file_name for e in self._snapshot()}

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> StoreStats:
        """Get store statistics."""
        entries = self._snapshot()
        file_names = sorted({e.file_name for e in entries})
        return StoreStats(
            total_vectors=len(entries),
            total_files=len(file_names),
            file_names=file_names,
            average_chunks_per_file=len(entries) / len(file_names) if file_names else 0.0,
        )
