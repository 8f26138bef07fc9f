"""
Test suite for the dependency container.
"""

import pytest

from dochive_rag.config.settings import Settings
from dochive_rag.container import Container, configure_container
from dochive_rag.core.exceptions import ConfigurationError
from dochive_rag.core.protocols.vector_store import VectorStoreProtocol
from dochive_rag.core.services.chat_service import ChatService
from dochive_rag.core.services.chunker import Chunker
from dochive_rag.core.services.ingest_service import IngestService
from dochive_rag.core.services.search_service import SearchService
from dochive_rag.infrastructure.vector_stores.memory_store import InMemoryVectorStore


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **{"embedding_backend": "ollama", **overrides})


class TestContainer:
    """Test suite for register and resolve."""

    def test_should_build_new_instance_per_resolve(self) -> None:
        container = Container()
        container.register(list, list)

        assert container.resolve(list) is not container.resolve(list)

    def test_singleton_should_be_cached_until_reset(self) -> None:
        container = Container()
        container.register(list, list, singleton=True)

        first = container.resolve(list)
        assert container.resolve(list) is first

        container.reset()
        assert container.resolve(list) is not first

    def test_unknown_interface_should_raise(self) -> None:
        with pytest.raises(KeyError):
            Container().resolve(dict)


class TestConfigureContainer:
    """Test suite for application wiring."""

    def test_services_should_share_one_store(self) -> None:
        container = configure_container(make_settings())

        store = container.resolve(VectorStoreProtocol)
        ingest = container.resolve(IngestService)
        search = container.resolve(SearchService)

        assert isinstance(store, InMemoryVectorStore)
        assert ingest._vector_store is store
        assert search._vector_store is store
        assert ingest._passage_prefix == "passage: "
        assert search._query_prefix == "query: "
        assert isinstance(container.resolve(ChatService), ChatService)

    def test_each_container_should_own_its_store(self) -> None:
        first = configure_container(make_settings()).resolve(VectorStoreProtocol)
        second = configure_container(make_settings()).resolve(VectorStoreProtocol)

        assert first is not second

    def test_chunker_should_follow_settings(self) -> None:
        container = configure_container(make_settings(chunk_size=300, chunk_overlap=30))

        options = container.resolve(Chunker).options

        assert (options.chunk_size, options.chunk_overlap) == (300, 30)

    def test_invalid_chunk_settings_should_fail_on_resolve(self) -> None:
        container = configure_container(make_settings(chunk_size=100, chunk_overlap=100))

        with pytest.raises(ConfigurationError):
            container.resolve(Chunker)

    def test_unknown_embedding_backend_should_raise(self) -> None:
        with pytest.raises(ValueError, match="Unknown embedding backend"):
            configure_container(make_settings(embedding_backend="word2vec"))
