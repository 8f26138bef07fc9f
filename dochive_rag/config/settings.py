
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    llm_base_url: str = "http://localhost:11434/v1"
    llm_model: str = "gemma2:latest"
    llm_max_tokens: int = 2000
    llm_temperature: float = 0.1
    llm_timeout: float = 120.0

    # "sentence-transformers" or "ollama"
    embedding_backend: str = "sentence-transformers"
    embedding_model: str = "intfloat/multilingual-e5-base"
    # e5 convention; clear both for models that take raw text
    embedding_query_prefix: str = "query: "
    embedding_passage_prefix: str = "passage: "
    ollama_embedding_model: str = "nomic-embed-text:latest"

    chunk_size: int = 1000
    chunk_overlap: int = 200
    chunk_preserve_sentences: bool = True

    rag_top_k: int = 5
    rag_similarity_threshold: float = 0.7
    rag_fallback_threshold: float = 0.3
    rag_fallback_top_k: int = 3

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
