"""Search service - similarity retrieval with fallback ladder."""

import logging
from typing import Optional

from ..exceptions import QueryEmbeddingFailedError
from ..models.document import RetrievalMode, SearchResponse, SearchResult
from ..protocols.embedder import EmbedderProtocol
from ..protocols.vector_store import VectorStoreProtocol

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"


class SearchService:
    """Search service scoped to a single document.

    Ladder: primary threshold, then a lowered threshold with fewer results,
    then the first chunks of the document in original order.
    """

    def __init__(
        self,
        embedder: EmbedderProtocol,
        vector_store: VectorStoreProtocol,
        top_k: int = 5,
        similarity_threshold: float = 0.7,
        fallback_threshold: float = 0.3,
        fallback_top_k: int = 3,
        query_prefix: str = "",
    ):
        """Initialize search service.

        Args:
            embedder: Embedding service.
            vector_store: Vector store.
            top_k: Number of results to return.
            similarity_threshold: Minimum similarity of the primary search.
            fallback_threshold: Minimum similarity of the fallback search.
            fallback_top_k: Result cap of both fallback steps.
            query_prefix: Text prepended to the query before embedding.
        """
        self._embedder = embedder
        self._vector_store = vector_store
        self._top_k = top_k
        self._similarity_threshold = similarity_threshold
        self._fallback_threshold = fallback_threshold
        self._fallback_top_k = fallback_top_k
        self._query_prefix = query_prefix

    def embed_query(self, query: str) -> list[float]:
        try:
            return self._embedder.embed(f"{self._query_prefix}{query}")
        except Exception as e:
            logger.error(f"Query embedding failed: {e}")
            raise QueryEmbeddingFailedError(
                f"Failed to embed query: {e}", {"query": query[:50]}
            ) from e

    def search(
        self,
        file_name: str,
        query: str,
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> SearchResponse:
        """Select the context chunks of a document for a query.

        Args:
            file_name: Document to search in.
            query: Search query.
            top_k: Override number of results.
            threshold: Override primary similarity threshold.

        Returns:
            Search response with mode, results, and context.

        Raises:
            QueryEmbeddingFailedError: The query could not be embedded.
        """
        top_k = top_k if top_k is not None else self._top_k
        threshold = threshold if threshold is not None else self._similarity_threshold

        query_embedding = self.embed_query(query)

        mode = RetrievalMode.RANKED
        hits = self._vector_store.similarity_search(
            query_embedding, top_k, threshold, file_name
        )

        if not hits:
            mode = RetrievalMode.RANKED_FALLBACK
            hits = self._vector_store.similarity_search(
                query_embedding,
                min(self._fallback_top_k, top_k),
                self._fallback_threshold,
                file_name,
            )

        if hits:
            results = [SearchResult(chunk=h.entry.chunk, score=h.similarity) for h in hits]
        else:
            mode = RetrievalMode.UNRANKED
            entries = self._vector_store.list_by_file_name(file_name)
            results = [SearchResult(chunk=e.chunk) for e in entries[: self._fallback_top_k]]

        if mode is not RetrievalMode.RANKED:
            logger.info(
                f"Fallback {mode.value} for '{query[:50]}...' in {file_name}: "
                f"{len(results)} chunks"
            )

        logger.info(f"Search: returned {len(results)}/{top_k} chunks for '{query[:50]}...'")

        return SearchResponse(
            mode=mode,
            results=results,
            context=self._format_context(results),
        )

    def _format_context(self, results: list[SearchResult]) -> str:
        """Format results as context for LLM."""
        parts = []
        for i, r in enumerate(results, 1):
            if r.score is not None:
                parts.append(f"[Chunk {i}, Similarity: {r.score:.3f}]\n{r.content}")
            else:
                parts.append(f"[Chunk {i}]\n{r.content}")

        return CONTEXT_SEPARATOR.join(parts)
