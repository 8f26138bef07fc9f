"""Chat service - coordinates indexing, search and LLM."""

import logging
from typing import Optional

from ..exceptions import GenerationFailedError
from ..models.chat import ChatAnswer, ChatMessage
from ..protocols.llm import LLMProtocol
from .ingest_service import IngestService
from .search_service import SearchService

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert document analysis assistant. You have access to relevant excerpts from a document called "{file_name}".

Your task is to answer questions about this document accurately and comprehensively. When answering:

1. Base your answers strictly on the information provided in the retrieved excerpts
2. If the answer is not explicitly in the excerpts, say so clearly
3. Provide specific quotes or references when possible
4. Be concise but thorough
5. If asked about topics not covered in the excerpts, explain what the excerpts do cover instead
6. Reference chunk numbers when citing specific information
{additional_context}
Retrieved relevant excerpts:
{context}"""

NO_EXCERPTS = "(no excerpts were retrieved from this document)"


class ChatService:
    """Answers questions about one document from its retrieved chunks."""

    def __init__(
        self,
        llm: LLMProtocol,
        ingest_service: IngestService,
        search_service: SearchService,
        temperature: float = 0.1,
        max_tokens: int = 2000,
    ):
        """Initialize chat service.

        Args:
            llm: LLM client.
            ingest_service: Indexes documents on first use.
            search_service: Selects context chunks.
            temperature: Sampling temperature.
            max_tokens: Max response tokens.
        """
        self._llm = llm
        self._ingest = ingest_service
        self._search = search_service
        self._temperature = temperature
        self._max_tokens = max_tokens

    def build_messages(
        self,
        file_name: str,
        query: str,
        context: str,
        additional_context: str = "",
    ) -> list[ChatMessage]:
        """Bind the retrieved context and the query into a conversation."""
        extra = f"\nAdditional context: {additional_context}\n" if additional_context else ""
        system_prompt = SYSTEM_PROMPT.format(
            file_name=file_name,
            additional_context=extra,
            context=context if context else NO_EXCERPTS,
        )
        return [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=query),
        ]

    async def answer_with_sources(
        self,
        file_name: str,
        file_content: str,
        query: str,
        additional_context: str = "",
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> ChatAnswer:
        """Answer a question and return the retrieval it was based on.

        Flow:
            1. Index the document unless it already has vectors
            2. Search with the fallback ladder
            3. One LLM call with the assembled context

        Raises:
            QueryEmbeddingFailedError: The query could not be embedded.
            GenerationFailedError: The LLM call failed.
        """
        self._ingest.index_document(file_name, file_content)

        search_response = self._search.search(
            file_name, query, top_k=top_k, threshold=threshold
        )
        messages = self.build_messages(
            file_name, query, search_response.context, additional_context
        )

        try:
            answer = await self._llm.generate(
                messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.error(f"Generation failed for '{query[:50]}...': {e}")
            raise GenerationFailedError(
                f"Failed to generate answer: {e}", {"file_name": file_name}
            ) from e

        logger.info(
            f"Answered '{query[:50]}...' from {len(search_response.results)} chunks "
            f"({search_response.mode.value})"
        )
        return ChatAnswer(answer=answer, search=search_response)

    async def answer(
        self,
        file_name: str,
        file_content: str,
        query: str,
        additional_context: str = "",
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> str:
        """Answer a question about a document.

        Args:
            file_name: Document name.
            file_content: Document text, indexed on first use.
            query: User question.
            additional_context: Extra instructions for the prompt.
            top_k: Override number of context chunks.
            threshold: Override primary similarity threshold.

        Returns:
            Generated answer, verbatim.
        """
        result = await self.answer_with_sources(
            file_name,
            file_content,
            query,
            additional_context=additional_context,
            top_k=top_k,
            threshold=threshold,
        )
        return result.answer
