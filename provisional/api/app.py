"""FastAPI application for the poem relay."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from provisional import __version__
from provisional.api.chat import router as chat_router
from provisional.relay import get_relay_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    generation = get_relay_config().generation
    logger.info(f"Relay ready, model={generation.model} max_tokens={generation.max_tokens}")
    yield
    logger.info("Relay stopped")


def create_app() -> FastAPI:
    """Build the app: the streaming /api/chat route plus /health.

    CORS is open so any browser front-end can call the route.
    """
    application = FastAPI(
        title="Provisional Relay API",
        description="Streams lineated poems from a fine-tuned model, fragment by fragment.",
        version=__version__,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "GET"],
        allow_headers=["*"],
    )
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "provisional"}

    return application


app = create_app()
