"""Tests for FastAPI endpoints."""

import base64

import pytest

from conftest import StubModel
from draftflow.client.bullets import parse_bullets
from draftflow.core.config import Settings
from draftflow.main import app
from draftflow.services.summarizer import SummarizationService, get_summarizer

SUMMARIZE = "/api/v1/summarize"


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class TestSummarizeEndpoint:
    """Tests for POST /api/v1/summarize."""

    def test_other_methods_not_allowed(self, app_client):
        response = app_client.get(SUMMARIZE)

        assert response.status_code == 405
        assert response.headers["allow"] == "POST"

    def test_json_text_file(self, app_client, stub_model: StubModel):
        response = app_client.post(
            SUMMARIZE,
            json={
                "files": [{"name": "a.txt", "type": "text/plain", "base64": b64("hello world")}],
                "notes": [],
            },
        )

        assert response.status_code == 200
        assert response.json() == {"summary": "• one\n• two"}
        assert parse_bullets(response.json()["summary"]) == ["one", "two"]
        assert "File: a.txt\nhello world" in stub_model.last_prompt

    def test_multipart_files_and_notes(self, app_client, stub_model: StubModel):
        response = app_client.post(
            SUMMARIZE,
            files=[
                ("file", ("first.txt", b"first body", "text/plain")),
                ("file", ("second.txt", b"second body", "text/plain")),
            ],
            data={"note": ["note one", "note two"]},
        )

        assert response.status_code == 200
        prompt = stub_model.last_prompt
        order = ["File: first.txt", "File: second.txt", "Note:\nnote one", "Note:\nnote two"]
        positions = [prompt.index(marker) for marker in order]
        assert positions == sorted(positions)

    def test_form_notes_only(self, app_client, stub_model: StubModel):
        response = app_client.post(SUMMARIZE, data={"note": "just a note"})

        assert response.status_code == 200
        assert stub_model.calls == 1

    def test_empty_request_rejected_without_remote_call(self, app_client, stub_model: StubModel):
        response = app_client.post(SUMMARIZE, json={"files": [], "notes": []})

        assert response.status_code == 400
        assert "error" in response.json()
        assert stub_model.calls == 0

    def test_blank_notes_rejected(self, app_client, stub_model: StubModel):
        response = app_client.post(SUMMARIZE, data={"note": ["  ", "\n"]})

        assert response.status_code == 400
        assert stub_model.calls == 0

    def test_no_extractable_text(self, app_client, stub_model: StubModel):
        response = app_client.post(
            SUMMARIZE,
            json={"files": [{"name": "empty.txt", "type": "text/plain", "base64": b64("   ")}]},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No extractable text found in files/notes."}
        assert stub_model.calls == 0

    def test_broken_pdf_does_not_fail_request(self, app_client, stub_model: StubModel):
        response = app_client.post(
            SUMMARIZE,
            files=[("file", ("broken.pdf", b"not really a pdf", "application/pdf"))],
            data={"note": "still have this"},
        )

        assert response.status_code == 200
        assert "broken.pdf" not in stub_model.last_prompt
        assert "still have this" in stub_model.last_prompt

    def test_upstream_rate_limit_is_bad_gateway(self, app_client, stub_model: StubModel):
        stub_model.fail(429, '{"error": {"message": "' + "slow down " * 300 + '"}}')

        response = app_client.post(SUMMARIZE, json={"notes": ["hello"]})

        assert response.status_code == 502
        data = response.json()
        assert data["status"] == 429
        assert data["error"] == "OpenAI request failed"
        assert 0 < len(data["details"]) <= 800
        assert stub_model.calls == 1

    def test_missing_credential_is_server_error(self, app_client, stub_model: StubModel):
        app.dependency_overrides[get_summarizer] = lambda: SummarizationService(
            Settings(_env_file=None, openai_api_key=None), client=stub_model.client()
        )

        response = app_client.post(SUMMARIZE, json={"notes": ["hello"]})

        assert response.status_code == 500
        assert response.json() == {"error": "Server is missing OPENAI_API_KEY."}
        assert stub_model.calls == 0

    def test_unexpected_error_is_server_error(self, app_client):
        class Exploding:
            async def summarize(self, request):
                raise RuntimeError("extractor blew up")

        app.dependency_overrides[get_summarizer] = lambda: Exploding()

        response = app_client.post(SUMMARIZE, json={"notes": ["hello"]})

        assert response.status_code == 500
        assert response.json() == {"error": "extractor blew up"}

    def test_malformed_upstream_payload_gives_placeholder(self, app_client, stub_model: StubModel):
        stub_model.payload = {"choices": []}

        response = app_client.post(SUMMARIZE, json={"notes": ["hello"]})

        assert response.status_code == 200
        assert response.json() == {"summary": "(No summary produced)"}

    def test_identical_requests_identical_summaries(self, app_client):
        body = {"files": [{"name": "a.txt", "type": "text/plain", "base64": b64("same")}]}

        first = app_client.post(SUMMARIZE, json=body)
        second = app_client.post(SUMMARIZE, json=body)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()

    def test_per_file_mode(self, app_client, stub_model: StubModel):
        response = app_client.post(
            SUMMARIZE,
            json={
                "mode": "per_file",
                "files": [
                    {"name": "a.txt", "type": "text/plain", "base64": b64("alpha")},
                    {"name": "b.txt", "type": "text/plain", "base64": b64("beta")},
                ],
            },
        )

        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["name"] for r in results] == ["a.txt", "b.txt"]
        assert stub_model.calls == 2

    def test_per_file_mode_one_failed_source_is_bad_gateway(self, app_client, stub_model: StubModel):
        stub_model.fail_for("beta", 429, "rate limited")

        response = app_client.post(
            SUMMARIZE,
            json={
                "mode": "per_file",
                "files": [
                    {"name": "a.txt", "type": "text/plain", "base64": b64("alpha")},
                    {"name": "b.txt", "type": "text/plain", "base64": b64("beta")},
                ],
            },
        )

        assert response.status_code == 502
        data = response.json()
        assert data["status"] == 429
        assert "results" not in data

    def test_data_url_base64_accepted(self, app_client, stub_model: StubModel):
        content = "data:text/plain;base64," + b64("from a data url")

        response = app_client.post(
            SUMMARIZE,
            json={"files": [{"name": "a.txt", "type": "text/plain", "base64": content}]},
        )

        assert response.status_code == 200
        assert "from a data url" in stub_model.last_prompt

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"content": b"{not json", "headers": {"Content-Type": "application/json"}},
            {"json": {"version": 2, "notes": ["hi"]}},
            {"json": {"notes": ["hi"], "extra": True}},
            {"json": {"files": [{"name": "a.txt"}]}},
            {"json": {"mode": "sideways", "notes": ["hi"]}},
            {"json": {"files": [{"name": "a.txt", "type": "text/plain", "base64": "a"}]}},
            {"content": b"hello", "headers": {"Content-Type": "text/plain"}},
        ],
    )
    def test_malformed_bodies_rejected(self, app_client, stub_model: StubModel, kwargs):
        response = app_client.post(SUMMARIZE, **kwargs)

        assert response.status_code == 400
        assert isinstance(response.json()["error"], str)
        assert stub_model.calls == 0


class TestAdminEndpoint:
    """Tests for admin endpoints."""

    def test_root(self, app_client):
        response = app_client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_health(self, app_client):
        response = app_client.get("/api/v1/admin/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["openai_configured"] is True

    def test_config_hides_secrets(self, app_client):
        response = app_client.get("/api/v1/admin/config")
        assert response.status_code == 200

        data = response.json()
        assert data["openai_model"] == "gpt-4o-mini"
        assert "openai_api_key" not in data
        assert "sk-test" not in response.text
