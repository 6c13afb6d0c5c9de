"""FastAPI application factory for the local client server.

The app serves image previews and a health check; NiceGUI is mounted onto it
by ``windchat.main`` to provide the chat pages.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from windchat import __version__
from windchat.api.routes import router as previews_router
from windchat.compose.previews import PreviewRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting WindChat client...")
    yield
    # Shutdown
    logger.info(f"Shutting down WindChat client ({len(app.state.previews)} previews live)")


def create_app(previews: PreviewRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        previews: Registry to serve. A fresh one is created if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="WindChat Client",
        description="Local server for the WindChat chat client UI and attachment previews.",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    application.state.previews = previews if previews is not None else PreviewRegistry()

    application.include_router(previews_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "windchat-client"}

    return application
