"""Completion relay over the OpenAI streaming chat API.

Core module for turning a chat transcript into a stream of poem fragments.

Architecture Decisions:

1. **Stateless** - The browser owns the transcript and sends it whole on every
   request. The relay keeps no history, so one instance can serve any number
   of sessions concurrently.

2. **Open, then iterate** - ``open_stream`` awaits the upstream request before
   handing back the fragment iterator. Rate limits and auth failures surface
   while the HTTP layer can still pick a status code; failures after the
   first fragment can only cut the stream short.

3. **No buffering** - Each delta is yielded the moment it arrives. Provider
   framing (chunk objects, empty deltas, the finish chunk) is dropped, the
   text itself is passed through untouched.

4. **Lazy client** - The AsyncOpenAI client is built on first use, so a
   missing API key never blocks startup.
"""

import logging
import time
from collections.abc import AsyncGenerator, AsyncIterator, Sequence

import httpx
import openai
from openai import AsyncOpenAI

from provisional.models.schemas import Turn
from provisional.relay.config import RelayConfig, get_relay_config
from provisional.relay.errors import RateLimitedError, RelayError
from provisional.relay.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class CompletionRelay:
    """Relays chat transcripts to the model provider as streaming completions.

    Wraps AsyncOpenAI with:
    - The fixed system prompt and generation parameters
    - Translation of provider errors into RelayError / RateLimitedError
    - A plain text fragment interface for the HTTP endpoint
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
            client: Optional preconfigured provider client.
        """
        self._config = config or get_relay_config()
        self._client = client

        if not self._config.has_api_key:
            logger.warning("OPENAI_API_KEY is not set; completion requests will fail")

    @property
    def config(self) -> RelayConfig:
        return self._config

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._config.api_key,
                base_url=self._config.base_url,
            )
        return self._client

    def build_messages(self, turns: Sequence[Turn]) -> list[dict[str, str]]:
        """Prepend the system prompt to the caller's turns.

        Args:
            turns: Conversation so far, oldest first.

        Returns:
            Messages in the provider's chat format.
        """
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        messages.extend({"role": turn.role, "content": turn.content} for turn in turns)
        return messages

    async def open_stream(self, turns: Sequence[Turn]) -> AsyncIterator[str]:
        """Start a streaming completion for the transcript.

        Args:
            turns: Conversation so far, oldest first.

        Returns:
            Async iterator over text fragments in arrival order.

        Raises:
            RateLimitedError: The provider rejected the request with HTTP 429.
            RelayError: Any other failure before streaming started.
        """
        messages = self.build_messages(turns)
        logger.info(f"Requesting completion for {len(turns)} turns")

        try:
            response = await self._get_client().chat.completions.create(
                messages=messages,
                **self._config.generation.request_kwargs(),
            )
        except openai.RateLimitError as e:
            logger.warning(f"Provider rate limit reached: {e}")
            raise RateLimitedError("Request limit reached") from e
        except (openai.OpenAIError, httpx.HTTPError) as e:
            logger.error(f"Completion request failed: {e}")
            raise RelayError(f"Completion request failed: {e}") from e

        return self._relay_fragments(response)

    async def _relay_fragments(self, response: AsyncIterator) -> AsyncGenerator[str]:
        """Unwrap provider chunks into text fragments.

        Raises:
            RelayError: The stream broke after it started. Fragments already
                yielded stay with the caller.
        """
        start_time = time.monotonic()
        fragment_count = 0
        char_count = 0

        try:
            async for chunk in response:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if not content:
                    continue

                if fragment_count == 0:
                    latency = time.monotonic() - start_time
                    logger.debug(f"First fragment after {latency:.2f}s")

                fragment_count += 1
                char_count += len(content)
                yield content
        except (openai.OpenAIError, httpx.HTTPError, ValueError, AttributeError, TypeError) as e:
            # ValueError covers undecodable SSE payloads, the others misshapen chunks
            logger.error(f"Completion stream aborted after {fragment_count} fragments: {e}")
            raise RelayError(f"Completion stream aborted: {e}") from e

        logger.info(
            f"Completion finished: {fragment_count} fragments, {char_count} chars, "
            f"{time.monotonic() - start_time:.2f}s"
        )


# Module-level singleton instance
_completion_relay: CompletionRelay | None = None


def get_completion_relay() -> CompletionRelay:
    """Get or create the global completion relay.

    Returns:
        The CompletionRelay instance.
    """
    global _completion_relay
    if _completion_relay is None:
        _completion_relay = CompletionRelay()
    return _completion_relay
