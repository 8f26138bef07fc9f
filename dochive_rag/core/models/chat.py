"""Chat domain models."""
from dataclasses import dataclass

from .document import SearchResponse


@dataclass
class ChatMessage:
    """Chat message."""
    role: str  # "user" | "assistant" | "system"
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatAnswer:
    """Generated answer with the retrieval it was based on."""
    answer: str
    search: SearchResponse

    @property
    def is_ranked(self) -> bool:
        return self.search.is_ranked
