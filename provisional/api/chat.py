"""Streaming completion relay endpoint.

Receives the chat transcript from the browser and streams the generated
poem back as chunked plain text.

A provider failure after the first fragment re-raises RelayError out of the
response body, aborting the chunked transfer so RelayClient sees a truncated
stream. uvicorn logs that traceback on top of the relay's own error line.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from provisional.models.schemas import ChatRequest
from provisional.relay import CompletionRelay, RateLimitedError, RelayError, get_completion_relay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_class=StreamingResponse)
async def chat(
    request: ChatRequest,
    relay: CompletionRelay = Depends(get_completion_relay),
) -> StreamingResponse:
    """Stream a completion for the given transcript.

    The upstream request is opened before the response starts, so failures
    that happen before the first fragment still map to a status code.

    Args:
        request: Transcript so far, oldest first.
        relay: Completion relay (injected).

    Returns:
        Chunked text/plain response carrying the fragments in arrival order.

    Raises:
        429: The model provider reported a rate limit.
        502: Any other upstream failure before streaming started.
    """
    try:
        fragments = await relay.open_stream(request.messages)
    except RateLimitedError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="You have reached your request limit for the day.",
        ) from e
    except RelayError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e

    return StreamingResponse(fragments, media_type="text/plain; charset=utf-8")
