"""FastAPI endpoints for the poem relay.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Streaming completion relay
"""

from provisional.api.app import app, create_app

__all__ = ["app", "create_app"]
