"""Relay configuration with environment variable loading.

Pydantic-based configuration for the completion relay. Generation
parameters are frozen: they are built once per process and sent unchanged
with every request.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_MODEL = "ft:gpt-4.1-2025-04-14:brown-university-library-cds:weirding-cody:DAhGkXPQ"


class GenerationParameters(BaseModel):
    """Sampling settings attached to every completion request.

    Attributes:
        model: Fine-tuned model identifier.
        max_tokens: Hard cap on output length (1 token is roughly 0.75 words).
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = very random).
        presence_penalty: Penalty on tokens that already appeared (-2.0 to 2.0).
        frequency_penalty: Penalty proportional to token frequency (-2.0 to 2.0).
        stream: Always True, the relay only speaks streaming completions.
    """

    model_config = ConfigDict(frozen=True)

    model: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL") or DEFAULT_MODEL,
        min_length=1,
        description="Model to use",
    )
    max_tokens: int = Field(default=300, ge=1, le=128000)
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    presence_penalty: float = Field(default=0.4, ge=-2.0, le=2.0)
    frequency_penalty: float = Field(default=0.3, ge=-2.0, le=2.0)
    stream: Literal[True] = True

    def request_kwargs(self) -> dict[str, str | int | float | bool]:
        """Return the parameters as keyword arguments for the provider call."""
        return self.model_dump()


class RelayConfig(BaseModel):
    """Configuration for the completion relay.

    Attributes:
        api_key: Provider API key. May be empty; requests then fail upstream.
        base_url: API base URL (None for OpenAI default).
        generation: Fixed generation parameters.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="API key for the model provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    generation: GenerationParameters = Field(default_factory=GenerationParameters)

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Strip surrounding whitespace from the API key."""
        return v.strip()

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.
    """
    return RelayConfig()
