"""Completion relay between the chat UI and the model provider.

Responsibilities:
    - Prepending the fixed system prompt to the caller's transcript
    - Sending the fixed generation parameters with every request
    - Forwarding streamed text fragments in arrival order
    - Translating provider failures into relay errors

Keeps no per-session state. The browser owns the transcript.
"""

from provisional.relay.completion_relay import CompletionRelay, get_completion_relay
from provisional.relay.config import GenerationParameters, RelayConfig, get_relay_config
from provisional.relay.errors import RateLimitedError, RelayError

__all__ = [
    "CompletionRelay",
    "GenerationParameters",
    "RateLimitedError",
    "RelayConfig",
    "RelayError",
    "get_completion_relay",
    "get_relay_config",
]
