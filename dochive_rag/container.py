import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


def _embedder_factory(settings: Settings) -> Callable[[], Any]:
    """Pick the embedder factory; model libraries are imported on resolve."""

    def ollama():
        from .infrastructure.embeddings.ollama_embedder import OllamaEmbedder

        return OllamaEmbedder(
            base_url=settings.llm_base_url,
            model=settings.ollama_embedding_model,
            timeout=settings.llm_timeout,
        )

    def sentence_transformers():
        from .infrastructure.embeddings.sentence_transformer import (
            SentenceTransformerEmbedder,
        )

        return SentenceTransformerEmbedder(settings.embedding_model)

    factories = {"ollama": ollama, "sentence-transformers": sentence_transformers}
    if settings.embedding_backend not in factories:
        raise ValueError(f"Unknown embedding backend: {settings.embedding_backend}")
    return factories[settings.embedding_backend]


def configure_container(settings: Settings) -> Container:
    """Build a container with all dependencies.

    Each call returns a new container owning its own vector store.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.models.document import ChunkingOptions
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.llm import LLMProtocol
    from .core.protocols.vector_store import VectorStoreProtocol
    from .core.services.chat_service import ChatService
    from .core.services.chunker import Chunker
    from .core.services.ingest_service import IngestService
    from .core.services.search_service import SearchService
    from .infrastructure.llm.ollama_client import OllamaClient
    from .infrastructure.vector_stores.memory_store import InMemoryVectorStore

    container = Container()

    container.register(EmbedderProtocol, _embedder_factory(settings), singleton=True)

    container.register(VectorStoreProtocol, InMemoryVectorStore, singleton=True)

    container.register(
        LLMProtocol,
        lambda: OllamaClient(
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout,
        ),
        singleton=True,
    )

    container.register(
        Chunker,
        lambda: Chunker(
            ChunkingOptions(
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
                preserve_sentences=settings.chunk_preserve_sentences,
            )
        ),
        singleton=True,
    )

    container.register(
        IngestService,
        lambda: IngestService(
            embedder=container.resolve(EmbedderProtocol),
            vector_store=container.resolve(VectorStoreProtocol),
            chunker=container.resolve(Chunker),
            passage_prefix=settings.embedding_passage_prefix,
        ),
        singleton=True,
    )

    container.register(
        SearchService,
        lambda: SearchService(
            embedder=container.resolve(EmbedderProtocol),
            vector_store=container.resolve(VectorStoreProtocol),
            top_k=settings.rag_top_k,
            similarity_threshold=settings.rag_similarity_threshold,
            fallback_threshold=settings.rag_fallback_threshold,
            fallback_top_k=settings.rag_fallback_top_k,
            query_prefix=settings.embedding_query_prefix,
        ),
        singleton=True,
    )

    container.register(
        ChatService,
        lambda: ChatService(
            llm=container.resolve(LLMProtocol),
            ingest_service=container.resolve(IngestService),
            search_service=container.resolve(SearchService),
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
