"""Chat-completion client for the remote model."""

import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import httpx
import openai

from draftflow.core.config import Settings, get_settings
from draftflow.core.exceptions import ConfigurationError, UpstreamError, truncate_details
from draftflow.models.summary import TokenUsage

logger = logging.getLogger(__name__)


class LLMClientError(Exception):
    """Error from LLM client."""

    pass


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.2,
        max_tokens: int = 600,
    ) -> Tuple[str, TokenUsage]:
        """Run one chat completion.

        Args:
            messages: Chat messages (system + user).
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.

        Returns:
            Tuple of (response_text, token_usage). ``response_text`` is empty
            when the provider returned no usable completion.

        Raises:
            UpstreamError: Provider answered with a non-success status.
            LLMClientError: Any other failure talking to the provider.
        """
        pass


def _first_message_text(response: Any) -> str:
    """Pull the first completion's text, or "" if the payload is malformed."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError):
        return ""
    return content.strip() if isinstance(content, str) else ""


def _token_usage(response: Any) -> TokenUsage:
    usage = getattr(response, "usage", None)
    if not usage:
        return TokenUsage()
    return TokenUsage(
        input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        total_tokens=getattr(usage, "total_tokens", 0) or 0,
    )


class OpenAIClient(BaseLLMClient):
    """OpenAI chat-completions client."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        details_limit: int = 800,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model
        self.details_limit = details_limit
        # SDK retries are off; retrying is the RetryPolicy's job
        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.2,
        max_tokens: int = 600,
    ) -> Tuple[str, TokenUsage]:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=messages,
            )
        except openai.APIStatusError as e:
            body = e.response.text if e.response is not None else ""
            logger.warning(f"OpenAI returned HTTP {e.status_code}")
            raise UpstreamError(
                e.status_code,
                truncate_details(body or e.message, self.details_limit),
            )
        except openai.OpenAIError as e:
            raise LLMClientError(f"OpenAI API error: {e}")

        return _first_message_text(response), _token_usage(response)


class LLMClientFactory:
    """Factory for creating LLM clients."""

    _clients: Dict[str, BaseLLMClient] = {}

    @classmethod
    def get_client(cls, settings: Optional[Settings] = None) -> BaseLLMClient:
        """Get or create the client for the configured model.

        Raises:
            ConfigurationError: If ``OPENAI_API_KEY`` is not configured.
        """
        settings = settings or get_settings()

        if not settings.openai_api_key:
            raise ConfigurationError("Server is missing OPENAI_API_KEY.")

        key_digest = hashlib.sha256(settings.openai_api_key.encode("utf-8")).hexdigest()[:16]
        key = f"{settings.openai_base_url}:{settings.openai_model}:{key_digest}"

        if key not in cls._clients:
            cls._clients[key] = OpenAIClient(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                base_url=settings.openai_base_url,
                timeout=settings.request_timeout_seconds,
                details_limit=settings.upstream_details_limit,
            )
            logger.info(f"Created LLM client: openai/{settings.openai_model}")

        return cls._clients[key]

    @classmethod
    def clear_cache(cls) -> None:
        """Clear client cache."""
        cls._clients.clear()
