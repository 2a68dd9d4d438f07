"""Summarization service - extraction, prompt assembly and the model call."""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from draftflow.core.config import Settings, get_settings
from draftflow.core.exceptions import ConfigurationError, NoContentError
from draftflow.models.summary import (
    ChunkKind,
    SourceSummary,
    SummarizeInput,
    SummarizeResponse,
    SummaryMode,
    TextChunk,
)
from draftflow.services.extractor import extract_chunks
from draftflow.services.llm_client import BaseLLMClient, LLMClientFactory
from draftflow.services.prompt_builder import build_messages
from draftflow.services.retry import RetryPolicy, retry_policy_from_settings

logger = logging.getLogger(__name__)

NO_SUMMARY_PLACEHOLDER = "(No summary produced)"
NO_INPUT_MESSAGE = (
    "No files or notes found. Upload files under field name 'file' "
    "and/or add notes under 'note'."
)
NO_TEXT_MESSAGE = "No extractable text found in files/notes."


class SummarizationService:
    """Turns uploaded files and notes into a bullet-point summary."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[BaseLLMClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.settings = settings or get_settings()
        self._client = client
        self.retry_policy = retry_policy or retry_policy_from_settings(self.settings)

    def _get_client(self) -> BaseLLMClient:
        if not self.settings.openai_api_key:
            raise ConfigurationError("Server is missing OPENAI_API_KEY.")
        if self._client is None:
            self._client = LLMClientFactory.get_client(self.settings)
        return self._client

    async def summarize(self, request: SummarizeInput) -> SummarizeResponse:
        """Summarize a batch of files and notes.

        Args:
            request: Normalized files, notes and mode.

        Returns:
            The model's text; per-source results in per-file mode.

        Raises:
            NoContentError: Nothing supplied, or nothing extractable.
            ConfigurationError: The model credential is not configured.
            UpstreamError: The model provider returned a non-success status.
        """
        if request.is_empty:
            raise NoContentError(NO_INPUT_MESSAGE)

        start_time = time.time()
        chunks = await extract_chunks(request.files, request.notes)
        if not chunks:
            raise NoContentError(NO_TEXT_MESSAGE)

        client = self._get_client()
        logger.info(
            f"Summarizing {len(chunks)} chunk(s) from {len(request.files)} file(s) "
            f"and {len(request.notes)} note(s), mode={request.mode.value}"
        )

        if request.mode == SummaryMode.PER_FILE:
            response = await self._summarize_per_source(client, chunks)
        else:
            response = SummarizeResponse(summary=await self._summarize_chunks(client, chunks))

        logger.info(f"Summary produced in {int((time.time() - start_time) * 1000)}ms")
        return response

    async def _summarize_chunks(
        self, client: BaseLLMClient, chunks: Sequence[TextChunk]
    ) -> str:
        messages = build_messages(chunks)
        text, usage = await self.retry_policy.run(
            lambda: client.complete(
                messages,
                temperature=self.settings.summary_temperature,
                max_tokens=self.settings.summary_max_tokens,
            )
        )
        logger.debug(f"Token usage: {usage.total_tokens}")
        return text or NO_SUMMARY_PLACEHOLDER

    async def _summarize_per_source(
        self, client: BaseLLMClient, chunks: Sequence[TextChunk]
    ) -> SummarizeResponse:
        summaries = await asyncio.gather(
            *(self._summarize_chunks(client, [chunk]) for chunk in chunks)
        )
        results = [
            SourceSummary(name=name, summary=summary)
            for name, summary in zip(source_names(chunks), summaries)
        ]
        combined = "\n\n".join(f"{r.name}\n{r.summary}" for r in results)
        return SummarizeResponse(summary=combined, results=results)


def source_names(chunks: Sequence[TextChunk]) -> List[str]:
    """Display names for chunks: file names, then ``Note 1``, ``Note 2``..."""
    names = []
    note_index = 0
    for chunk in chunks:
        if chunk.kind == ChunkKind.FILE:
            names.append(chunk.name)
        else:
            note_index += 1
            names.append(f"Note {note_index}")
    return names


def get_summarizer() -> SummarizationService:
    """Dependency provider for the summarization service."""
    return SummarizationService(get_settings())
