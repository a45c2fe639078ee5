"""HTTP client for the completion relay endpoint."""

import logging
import os
from collections.abc import AsyncGenerator, AsyncIterator, Sequence
from contextlib import asynccontextmanager

import httpx

from provisional.relay.errors import RateLimitedError, RelayError

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
CHAT_PATH = "/api/chat"


class RelayClient:
    """Opens fragment streams against ``POST /api/chat``."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    @asynccontextmanager
    async def open_stream(
        self, turns: Sequence[dict[str, str]]
    ) -> AsyncGenerator[AsyncIterator[str]]:
        """Send the transcript and yield an iterator over the reply fragments.

        Raises:
            RateLimitedError: The relay answered 429.
            RelayError: Any other status or a transport failure.
        """
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                async with client.stream(
                    "POST",
                    CHAT_PATH,
                    json={"messages": list(turns)},
                ) as response:
                    if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
                        raise RateLimitedError("Request limit reached")
                    if response.status_code != httpx.codes.OK:
                        raise RelayError(f"HTTP {response.status_code}")
                    yield _fragments(response)
            except httpx.HTTPError as e:
                logger.warning(f"Relay request failed: {e}")
                raise RelayError(f"Connection failed: {e}") from e


async def _fragments(response: httpx.Response) -> AsyncGenerator[str]:
    try:
        async for text in response.aiter_text():
            if text:
                yield text
    except httpx.HTTPError as e:
        raise RelayError(f"Stream interrupted: {e}") from e
