"""Main application entry point.

Runs FastAPI (port 8000) with NiceGUI mounted for the chat interface.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run FastAPI with NiceGUI mounted on the same server.

    FastAPI serves the health check and attachment previews, NiceGUI the
    login and chat pages. Both are reachable on one port.
    """
    import uvicorn
    from nicegui import ui

    from windchat.api.app import create_app
    from windchat.context import get_chat_context
    from windchat.ui.chat_page import chat_page  # noqa: F401 - Registers the pages

    context = get_chat_context()
    app = create_app(context.previews)

    ui.run_with(
        app,
        title="WindChat",
        favicon="💬",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "windchat-secret"),
    )

    logger.info(f"Using chat backend at {context.config.api_base_url}")
    logger.info("Chat UI available at http://localhost:8000/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
