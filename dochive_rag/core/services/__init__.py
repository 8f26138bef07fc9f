"""Core business services."""
from .chunker import Chunker
from .search_service import SearchService
from .chat_service import ChatService
from .ingest_service import IngestService

__all__ = [
    "Chunker",
    "SearchService",
    "ChatService",
    "IngestService",
]
