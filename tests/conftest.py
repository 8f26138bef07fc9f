"""
Shared test fixtures.

Provides: deterministic fake embedder, recording fake LLM, fresh vector store
and services wired around them.
"""

import hashlib
import re
from typing import Optional

import pytest

from dochive_rag.core.models.chat import ChatMessage
from dochive_rag.core.models.document import ChunkingOptions
from dochive_rag.core.services.chat_service import ChatService
from dochive_rag.core.services.chunker import Chunker
from dochive_rag.core.services.ingest_service import IngestService
from dochive_rag.core.services.search_service import SearchService
from dochive_rag.infrastructure.vector_stores.memory_store import InMemoryVectorStore


class FakeEmbedder:
    """Hashing bag-of-words embedder with optional fixed vectors and failures."""

    def __init__(
        self,
        dim: int = 256,
        vectors: Optional[dict[str, list[float]]] = None,
        fail_on: Optional[set[str]] = None,
    ):
        self.dim = dim
        self.vectors = vectors or {}
        self.fail_on = fail_on or set()
        self.calls: list[str] = []

    def warmup(self) -> None:
        pass

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        for marker in self.fail_on:
            if marker in text:
                raise RuntimeError(f"provider down for '{marker}'")
        if text in self.vectors:
            return list(self.vectors[text])

        vector = [0.0] * self.dim
        for token in re.findall(r"\w+", text.lower()):
            digest = hashlib.md5(token.encode()).hexdigest()
            vector[int(digest, 16) % self.dim] += 1.0
        return vector


class FakeLLM:
    """Async LLM that records every conversation it receives."""

    def __init__(self, answer: str = "Generated answer.", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.calls: list[dict] = []

    async def generate(
        self,
        messages: list[ChatMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        self.calls.append(
            {"messages": messages, "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def store() -> InMemoryVectorStore:
    """Provide an empty vector store."""
    return InMemoryVectorStore()


@pytest.fixture
def embedder() -> FakeEmbedder:
    """Provide hashing embedder."""
    return FakeEmbedder()


@pytest.fixture
def llm() -> FakeLLM:
    """Provide recording LLM."""
    return FakeLLM()


@pytest.fixture
def chunker() -> Chunker:
    """Provide chunker that keeps every short sentence in its own chunk."""
    return Chunker(ChunkingOptions(chunk_size=40, chunk_overlap=0))


@pytest.fixture
def ingest_service(embedder, store, chunker) -> IngestService:
    return IngestService(embedder=embedder, vector_store=store, chunker=chunker)


@pytest.fixture
def search_service(embedder, store) -> SearchService:
    return SearchService(embedder=embedder, vector_store=store)


@pytest.fixture
def chat_service(llm, ingest_service, search_service) -> ChatService:
    return ChatService(
        llm=llm,
        ingest_service=ingest_service,
        search_service=search_service,
        temperature=0.2,
        max_tokens=500,
    )
