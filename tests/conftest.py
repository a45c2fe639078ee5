"""Pytest fixtures and shared test configuration.

Fixtures:
    - fake_relay: In-memory stand-in for CompletionRelay
    - async_client: HTTPX client for API testing, relay dependency overridden
    - relay_config: RelayConfig with a dummy key and default generation parameters

The fake relay is injected through FastAPI's dependency overrides so no
request ever reaches the model provider.
"""

from collections.abc import AsyncGenerator, AsyncIterator, Sequence

import pytest
from httpx import ASGITransport, AsyncClient

from provisional.api import app
from provisional.models.schemas import Turn
from provisional.relay import RelayConfig, get_completion_relay


class FakeRelay:
    """Records transcripts and replays canned fragments or an error."""

    def __init__(
        self,
        fragments: Sequence[str] = (),
        error: Exception | None = None,
        stream_error: Exception | None = None,
    ) -> None:
        self.fragments = list(fragments)
        self.error = error
        self.stream_error = stream_error
        self.calls: list[list[Turn]] = []

    async def open_stream(self, turns: Sequence[Turn]) -> AsyncIterator[str]:
        self.calls.append(list(turns))
        if self.error is not None:
            raise self.error
        return self._iterate()

    async def _iterate(self) -> AsyncGenerator[str]:
        for fragment in self.fragments:
            yield fragment
        if self.stream_error is not None:
            raise self.stream_error


@pytest.fixture(autouse=True)
def _no_model_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's LLM_MODEL from leaking into default parameters."""
    monkeypatch.delenv("LLM_MODEL", raising=False)


@pytest.fixture
def relay_config() -> RelayConfig:
    return RelayConfig(api_key="sk-test-key", base_url=None)


@pytest.fixture
def fake_relay() -> FakeRelay:
    return FakeRelay(["The window ", "keeps its weather\n", "folded."])


@pytest.fixture
async def async_client(fake_relay: FakeRelay) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient whose requests hit the fake relay.
    """
    app.dependency_overrides[get_completion_relay] = lambda: fake_relay
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
