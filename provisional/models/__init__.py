"""Pydantic models for API requests.

Models:
    - Turn: One message of the chat transcript
    - ChatRequest: Incoming relay request payload
"""

from provisional.models.schemas import ChatRequest, Turn

__all__ = ["ChatRequest", "Turn"]
