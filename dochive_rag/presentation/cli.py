
import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path

import httpx

from dochive_rag.config.settings import Settings, settings
from dochive_rag.container import configure_container
from dochive_rag.core.exceptions import EmbeddingFailedError, RAGError
from dochive_rag.core.models.document import ChunkingOptions
from dochive_rag.core.protocols.embedder import EmbedderProtocol
from dochive_rag.core.services.chat_service import ChatService
from dochive_rag.core.services.chunker import Chunker
from dochive_rag.core.services.ingest_service import IngestService

logger = logging.getLogger(__name__)


def ensure_ollama_models(config: Settings, attempts: int = 30, delay: float = 2.0) -> bool:
    """Ensure the Ollama models used by the configuration are available.

    Every attempt, pull included, is retried on transport or payload errors.

    Returns:
        True if models ready, False otherwise.
    """
    models = [config.llm_model]
    if config.embedding_backend == "ollama":
        models.append(config.ollama_embedding_model)
    base_url = config.llm_base_url.replace("/v1", "")

    logger.info(f"Checking Ollama models: {', '.join(models)}")

    for attempt in range(attempts):
        try:
            resp = httpx.get(f"{base_url}/api/tags", timeout=5)
            resp.raise_for_status()
            available = [m["name"] for m in resp.json().get("models", [])]

            missing = [m for m in models if not any(m in name for name in available)]
            if not missing:
                logger.info("Models are ready")
                return True

            for model in missing:
                logger.info(f"Pulling model {model}...")
                pull_resp = httpx.post(
                    f"{base_url}/api/pull",
                    json={"name": model},
                    timeout=600,  # Model pull can take a while
                )
                pull_resp.raise_for_status()
            return True
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.info(f"Waiting for Ollama... ({attempt + 1}/{attempts}): {e}")
            time.sleep(delay)

    logger.error("Ollama not available")
    return False


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def cmd_chunk(args: argparse.Namespace) -> int:
    """Chunk command - print the chunks of a text file."""
    options = ChunkingOptions(
        chunk_size=args.chunk_size,
        chunk_overlap=args.chunk_overlap,
        preserve_sentences=not args.no_sentences,
    )
    chunks = Chunker(options).chunk(_read(args.path), Path(args.path).name)

    for chunk in chunks:
        print(f"[{chunk.id}] chars {chunk.start_char}-{chunk.end_char} ({len(chunk.content)})")
        print(chunk.content)
        print()

    logger.info(f"{len(chunks)} chunks")
    return 0


def cmd_ask(args: argparse.Namespace) -> int:
    """Ask command - index a text file and answer a question about it."""
    container = configure_container(settings)
    chat_service = container.resolve(ChatService)
    ingest_service = container.resolve(IngestService)

    result = asyncio.run(
        chat_service.answer_with_sources(
            Path(args.path).name,
            _read(args.path),
            args.question,
            top_k=args.top_k,
            threshold=args.threshold,
        )
    )

    print(result.answer)
    print()
    print(f"Sources ({result.search.mode.value}): {', '.join(result.search.sources) or '-'}")

    logger.info(f"RAG stats: {ingest_service.indexing_status()}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Check command - make sure Ollama serves the models and the embedder loads."""
    if not ensure_ollama_models(settings):
        return 1

    embedder = configure_container(settings).resolve(EmbedderProtocol)
    try:
        embedder.warmup()
    except Exception as e:
        raise EmbeddingFailedError(f"Embedder warmup failed: {e}") from e
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dochive-rag", description="Ask questions about a text document"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    chunk = sub.add_parser("chunk", help="Print document chunks")
    chunk.add_argument("path")
    chunk.add_argument("--chunk-size", type=int, default=settings.chunk_size)
    chunk.add_argument("--chunk-overlap", type=int, default=settings.chunk_overlap)
    chunk.add_argument("--no-sentences", action="store_true", help="Fixed-size windows")
    chunk.set_defaults(func=cmd_chunk)

    ask = sub.add_parser("ask", help="Answer a question about a document")
    ask.add_argument("path")
    ask.add_argument("question")
    ask.add_argument("--top-k", type=int, default=None)
    ask.add_argument("--threshold", type=float, default=None)
    ask.set_defaults(func=cmd_ask)

    check = sub.add_parser("check", help="Check Ollama models")
    check.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    try:
        return args.func(args)
    except (RAGError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
