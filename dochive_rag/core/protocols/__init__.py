"""Protocol interfaces for dependency injection."""
from .embedder import EmbedderProtocol
from .vector_store import VectorStoreProtocol
from .llm import LLMProtocol

__all__ = [
    "EmbedderProtocol",
    "VectorStoreProtocol",
    "LLMProtocol",
]
