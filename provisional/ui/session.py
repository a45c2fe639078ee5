"""Chat session state for one open chat page.

The session owns the transcript and the single in-flight submission gate.
It knows nothing about NiceGUI; the page passes callbacks for re-rendering
and for the rate-limit notice.
"""

import logging
from collections.abc import AsyncIterator, Callable, MutableMapping, Sequence
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from provisional.relay.errors import RateLimitedError, RelayError

logger = logging.getLogger(__name__)

INITIAL_PROMPT_KEY = "initial_prompt"
TRANSCRIPT_FILENAME = "poem.txt"
TRANSCRIPT_DIVIDER = "\n\n---\n\n"


class SessionPhase(str, Enum):
    """Lifecycle of a single submission."""

    IDLE = "idle"
    AWAITING_FIRST_FRAGMENT = "awaiting-first-fragment"
    STREAMING = "streaming"
    SETTLED = "settled"


@dataclass
class ChatTurn:
    """One message of the transcript as held by the page."""

    role: str
    content: str

    def as_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class FragmentSource(Protocol):
    def open_stream(
        self, turns: Sequence[dict[str, str]]
    ) -> AbstractAsyncContextManager[AsyncIterator[str]]: ...


class ChatSession:
    """Manages the transcript and submission state for a chat page."""

    def __init__(
        self,
        relay: FragmentSource,
        on_change: Callable[[], None] | None = None,
        on_rate_limited: Callable[[], None] | None = None,
    ) -> None:
        self.turns: list[ChatTurn] = []
        self.input: str = ""
        self.phase: SessionPhase = SessionPhase.IDLE
        self._relay = relay
        self._on_change = on_change or (lambda: None)
        self._on_rate_limited = on_rate_limited or (lambda: None)
        self._seeded = False

    @property
    def is_busy(self) -> bool:
        return self.phase is not SessionPhase.IDLE

    @property
    def has_assistant_turn(self) -> bool:
        return any(turn.role == "assistant" for turn in self.turns)

    def _set_phase(self, phase: SessionPhase) -> None:
        self.phase = phase
        self._on_change()

    async def submit(self, text: str) -> bool:
        """Append a user turn and stream the reply into a new assistant turn.

        Returns:
            False if the submission was rejected (empty text or busy).
        """
        if not text or self.is_busy:
            return False

        self.turns.append(ChatTurn("user", text))
        self.input = ""
        self._set_phase(SessionPhase.AWAITING_FIRST_FRAGMENT)

        history = [turn.as_dict() for turn in self.turns]
        reply: ChatTurn | None = None

        try:
            async with self._relay.open_stream(history) as fragments:
                reply = ChatTurn("assistant", "")
                self.turns.append(reply)
                self._on_change()
                async for fragment in fragments:
                    reply.content += fragment
                    if self.phase is SessionPhase.AWAITING_FIRST_FRAGMENT:
                        self._set_phase(SessionPhase.STREAMING)
                    else:
                        self._on_change()
        except RateLimitedError:
            logger.info("Request limit reached")
            self._set_phase(SessionPhase.IDLE)
            self._on_rate_limited()
            return True
        except RelayError as e:
            logger.warning(f"Reply stream ended early: {e}")
            if reply is None:
                self.turns.append(ChatTurn("assistant", ""))
        finally:
            if self.phase is not SessionPhase.IDLE:
                self._set_phase(SessionPhase.SETTLED)
                self._set_phase(SessionPhase.IDLE)

        return True

    async def submit_input(self) -> bool:
        return await self.submit(self.input)

    async def seed_from_external_prompt(self, storage: MutableMapping[str, str]) -> bool:
        """Auto-submit the prompt carried over from the landing page.

        The prompt is removed from storage on read and only honoured once
        per session.
        """
        if self._seeded:
            return False
        prompt = storage.pop(INITIAL_PROMPT_KEY, None)
        if not prompt:
            return False
        self._seeded = True
        return await self.submit(prompt)

    def export_transcript(self) -> str:
        """Render the transcript as plain text for download."""
        return TRANSCRIPT_DIVIDER.join(
            ("You:\n" if turn.role == "user" else "Poem:\n") + turn.content
            for turn in self.turns
        )
