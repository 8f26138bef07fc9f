
import logging
from typing import Optional

from openai import AsyncOpenAI

from dochive_rag.core.models.chat import ChatMessage

logger = logging.getLogger(__name__)


class OllamaClient:
    """LLM client for Ollama (OpenAI-compatible API)."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "gemma2:latest",
        max_tokens: int = 2000,
        temperature: float = 0.1,
        timeout: float = 120.0,
    ):
        """Initialize Ollama client.

        Args:
            base_url: Ollama API URL.
            model: Model name.
            max_tokens: Default max response tokens.
            temperature: Default sampling temperature.
            timeout: Request timeout in seconds.
        """
        self._client = AsyncOpenAI(base_url=base_url, api_key="ollama", timeout=timeout)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def generate(
        self,
        messages: list[ChatMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Generate a non-streamed completion.

        Args:
            messages: Conversation.
            temperature: Sampling temperature override.
            max_tokens: Max response tokens override.

        Returns:
            Response text.
        """
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[m.to_dict() for m in messages],
            max_tokens=max_tokens if max_tokens is not None else self._max_tokens,
            temperature=temperature if temperature is not None else self._temperature,
        )

        content = response.choices[0].message.content or ""
        logger.debug(f"Generated {len(content)} chars with {self._model}")
        return content
