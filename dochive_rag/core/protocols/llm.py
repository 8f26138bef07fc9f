"""LLM protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable

from ..models.chat import ChatMessage


@runtime_checkable
class LLMProtocol(Protocol):
    """Protocol for LLM client."""

    async def generate(
        self,
        messages: list[ChatMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Generate a completion for the conversation.

        Args:
            messages: Conversation, system instructions first.
            temperature: Sampling temperature override.
            max_tokens: Max response tokens override.

        Returns:
            Generated text.
        """
        ...
