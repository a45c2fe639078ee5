"""Integration tests for the streaming relay endpoint.

Runs the real FastAPI app through httpx ASGITransport with the relay
dependency replaced by FakeRelay, so the HTTP contract is exercised without
contacting the model provider.

Requirements:
    - OPENAI_API_KEY environment variable for the live provider test
    - Tests marked with @requires_api_key are skipped without key
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

from provisional.api.app import app
from provisional.relay import (
    CompletionRelay,
    GenerationParameters,
    RateLimitedError,
    RelayConfig,
    RelayError,
    get_completion_relay,
)
from tests.conftest import FakeRelay


def has_openai_key() -> bool:
    """Check if OpenAI API key is configured."""
    key = os.environ.get("OPENAI_API_KEY", "")
    return bool(key and not key.isspace())


requires_api_key = pytest.mark.skipif(
    not has_openai_key(),
    reason="OPENAI_API_KEY not set - skipping LLM integration test",
)

TRANSCRIPT = {"messages": [{"role": "user", "content": "Write about a window"}]}


class TestStreamingEndpoint:
    """Integration tests for POST /api/chat."""

    async def test_stream_returns_plain_text(self, async_client: AsyncClient) -> None:
        """Streaming endpoint returns text/plain chunks."""
        async with async_client.stream("POST", "/api/chat", json=TRANSCRIPT) as response:
            assert response.status_code == 200
            assert response.headers["content-type"].startswith("text/plain")

    async def test_body_is_fragments_in_order(
        self, async_client: AsyncClient, fake_relay: FakeRelay
    ) -> None:
        """Concatenated body equals the fragments in arrival order."""
        response = await async_client.post("/api/chat", json=TRANSCRIPT)

        assert response.status_code == 200
        assert response.text == "The window keeps its weather\nfolded."

    async def test_multibyte_fragments_pass_through(
        self, async_client: AsyncClient, fake_relay: FakeRelay
    ) -> None:
        fake_relay.fragments = ["café ", "—", " 雨\n", "🌧"]

        response = await async_client.post("/api/chat", json=TRANSCRIPT)

        assert response.text == "café — 雨\n🌧"

    async def test_relay_receives_transcript_in_order(
        self, async_client: AsyncClient, fake_relay: FakeRelay
    ) -> None:
        """Turns reach the relay oldest first, extra client keys dropped."""
        payload = {
            "messages": [
                {"role": "user", "content": "one", "id": "abc", "createdAt": "2024-01-01"},
                {"role": "assistant", "content": "two"},
                {"role": "user", "content": "three"},
            ]
        }

        await async_client.post("/api/chat", json=payload)

        (turns,) = fake_relay.calls
        assert [(t.role, t.content) for t in turns] == [
            ("user", "one"),
            ("assistant", "two"),
            ("user", "three"),
        ]

    async def test_empty_transcript_is_accepted(
        self, async_client: AsyncClient, fake_relay: FakeRelay
    ) -> None:
        """No local length rules; an empty list is forwarded as-is."""
        response = await async_client.post("/api/chat", json={"messages": []})

        assert response.status_code == 200
        assert fake_relay.calls == [[]]

    async def test_health(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/health")

        assert response.json() == {"status": "healthy", "service": "provisional"}


class TestStreamingErrorHandling:
    """Tests for error scenarios in the relay endpoint."""

    async def test_rate_limit_returns_429(
        self, async_client: AsyncClient, fake_relay: FakeRelay
    ) -> None:
        fake_relay.error = RateLimitedError("Request limit reached")

        response = await async_client.post("/api/chat", json=TRANSCRIPT)

        assert response.status_code == 429
        assert "request limit" in response.json()["detail"]

    async def test_upstream_failure_returns_502(
        self, async_client: AsyncClient, fake_relay: FakeRelay
    ) -> None:
        fake_relay.error = RelayError("Completion request failed: 401 Unauthorized")

        response = await async_client.post("/api/chat", json=TRANSCRIPT)

        assert response.status_code == 502
        assert "401" in response.json()["detail"]

    async def test_mid_stream_failure_aborts_body(
        self, async_client: AsyncClient, fake_relay: FakeRelay
    ) -> None:
        """A failure after the first fragment propagates instead of ending the body cleanly."""
        fake_relay.stream_error = RelayError("Completion stream aborted: reset")

        with pytest.raises(Exception) as exc_info:
            await async_client.post("/api/chat", json=TRANSCRIPT)

        if isinstance(exc_info.value, ExceptionGroup):
            assert exc_info.group_contains(RelayError)
        else:
            assert isinstance(exc_info.value, RelayError)

    async def test_missing_messages_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/chat", json={})

        assert response.status_code == 422

    async def test_unknown_role_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/chat", json={"messages": [{"role": "narrator", "content": "x"}]}
        )

        assert response.status_code == 422

    async def test_missing_content_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/chat", json={"messages": [{"role": "user"}]}
        )

        assert response.status_code == 422

    async def test_invalid_json_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/chat",
            content="not valid json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422

    async def test_wrong_http_method_returns_405(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/chat")

        assert response.status_code == 405

    async def test_cors_headers_present(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/chat", json=TRANSCRIPT, headers={"Origin": "http://localhost:3000"}
        )

        assert "access-control-allow-origin" in response.headers


class TestLiveProvider:
    """Round trip through the real provider."""

    @pytest.fixture
    async def client(self) -> AsyncClient:
        """Client whose relay targets a model any key can use."""
        generation = GenerationParameters(model=os.getenv("LLM_MODEL") or "gpt-4.1-mini")
        relay = CompletionRelay(config=RelayConfig(generation=generation))
        app.dependency_overrides[get_completion_relay] = lambda: relay
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
        app.dependency_overrides.clear()

    @requires_api_key
    async def test_poem_streams_back(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "Four lines about a kettle."}]},
            timeout=60.0,
        )

        assert response.status_code == 200
        assert len(response.text) > 0
