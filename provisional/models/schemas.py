from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["system", "user", "assistant"]


class Turn(BaseModel):
    """A single message in the chat transcript.

    Extra keys sent by browser chat clients (ids, timestamps) are ignored.

    Attributes:
        role: The speaker identifier (system, user, or assistant).
        content: The message text.
    """

    role: Role = Field(..., description="Message role: 'system', 'user', or 'assistant'")
    content: str = Field(..., description="The message content")


class ChatRequest(BaseModel):
    """Request payload for the completion relay endpoint.

    Attributes:
        messages: Conversation so far, oldest first.
    """

    messages: list[Turn]
