"""Entry point: one uvicorn server for the relay route and the NiceGUI pages."""

import logging
import os
import sys

from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def build_app() -> FastAPI:
    """Create the relay API and mount the landing and chat pages on it."""
    from nicegui import ui

    from provisional.api.app import create_app
    from provisional.ui import pages  # noqa: F401 - registers / and /chat

    app = create_app()
    ui.run_with(
        app,
        title="The Provisional",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "provisional-secret"),
    )
    return app


def main() -> None:
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    app = build_app()

    logger.info(f"Serving poems on http://{host}:{port}/ (relay at /api/chat)")
    uvicorn.run(app, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
