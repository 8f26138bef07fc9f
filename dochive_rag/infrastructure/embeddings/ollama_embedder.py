import logging

from openai import OpenAI

logger = logging.getLogger(__name__)


class OllamaEmbedder:
    """Embedder for Ollama (OpenAI-compatible API)."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "nomic-embed-text:latest",
        timeout: float = 60.0,
    ):
        """Initialize Ollama embedder.

        Args:
            base_url: Ollama API URL.
            model: Embedding model name.
            timeout: Request timeout in seconds.
        """
        self._client = OpenAI(base_url=base_url, api_key="ollama", timeout=timeout)
        self._model = model

    def warmup(self) -> None:
        self.embed("warmup")
        logger.info(f"Embedding model {self._model} warmed up")

    def embed(self, text: str) -> list[float]:
        response = self._client.embeddings.create(model=self._model, input=text)
        if not response.data:
            raise ValueError(f"No embedding returned by {self._model}")
        return list(response.data[0].embedding)
