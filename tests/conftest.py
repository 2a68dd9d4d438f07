"""Pytest configuration and fixtures."""

import json
import os
from typing import Any, Dict, Generator, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["OPENAI_API_KEY"] = "sk-test"
os.environ["SEED_STORE_BACKEND"] = "memory"
os.environ["UPSTREAM_MAX_RETRIES"] = "0"

from draftflow.core.config import Settings, get_settings  # noqa: E402
from draftflow.services.llm_client import LLMClientFactory, OpenAIClient  # noqa: E402
from draftflow.services.seed_store import reset_seed_store  # noqa: E402
from draftflow.services.summarizer import SummarizationService, get_summarizer  # noqa: E402


def chat_completion(content: Optional[str]) -> Dict[str, Any]:
    """A minimal chat.completion payload."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 12, "completion_tokens": 6, "total_tokens": 18},
    }


class StubModel:
    """Stand-in for the chat-completions API behind an httpx MockTransport."""

    def __init__(self, content: str = "• one\n• two"):
        self.status_code = 200
        self.payload: Any = chat_completion(content)
        self.raw_body: Optional[str] = None
        self.error: Optional[Exception] = None
        self.requests: List[httpx.Request] = []
        self.bodies: List[Dict[str, Any]] = []
        self.failures: Dict[str, Tuple[int, str]] = {}

    def reply(self, content: Optional[str]) -> None:
        self.status_code = 200
        self.payload = chat_completion(content)
        self.raw_body = None

    def fail(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.raw_body = body

    def fail_for(self, marker: str, status_code: int, body: str) -> None:
        """Fail only calls whose prompt contains ``marker``."""
        self.failures[marker] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(json.loads(request.content))
        if self.error is not None:
            raise self.error
        for marker, (status_code, body) in self.failures.items():
            if marker in self.last_prompt:
                return httpx.Response(status_code, text=body)
        if self.raw_body is not None:
            return httpx.Response(self.status_code, text=self.raw_body)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def last_prompt(self) -> str:
        return self.bodies[-1]["messages"][1]["content"]

    def client(self) -> OpenAIClient:
        return OpenAIClient(
            api_key="sk-test",
            model="gpt-4o-mini",
            base_url="https://llm.test/v1",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
        )


@pytest.fixture
def settings() -> Settings:
    """Settings with a model credential and no retries."""
    return Settings(_env_file=None, openai_api_key="sk-test", upstream_max_retries=0)


@pytest.fixture
def stub_model() -> StubModel:
    return StubModel()


@pytest.fixture
def summarizer(settings: Settings, stub_model: StubModel) -> SummarizationService:
    return SummarizationService(settings, client=stub_model.client())


@pytest.fixture
def app_client(summarizer: SummarizationService) -> Generator[TestClient, None, None]:
    """Test client whose summarize route talks to the stub model."""
    get_settings.cache_clear()
    LLMClientFactory.clear_cache()
    reset_seed_store()

    from draftflow.main import app

    app.dependency_overrides[get_summarizer] = lambda: summarizer

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    reset_seed_store()
    get_settings.cache_clear()
