import logging
from functools import cached_property

from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Local embedder; one text in, one vector out."""

    def __init__(self, model_name: str = "intfloat/multilingual-e5-base", normalize: bool = True):
        """Initialize local embedder.

        Args:
            model_name: HuggingFace model id.
            normalize: Return unit-length vectors.
        """
        self._model_name = model_name
        self._normalize = normalize

    @cached_property
    def model(self) -> SentenceTransformer:
        logger.info(f"Loading embedding model: {self._model_name}")
        return SentenceTransformer(self._model_name)

    @property
    def dimension(self) -> int:
        return self.model.get_sentence_embedding_dimension()

    def warmup(self) -> None:
        logger.info(f"Embedding model ready ({self.dimension} dims)")

    def embed(self, text: str) -> list[float]:
        vector = self.model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=self._normalize,
        )
        return vector.tolist()
