"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from life_dashboard.api.routes import router
from life_dashboard.app_logging import configure_logging
from life_dashboard.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Dashboard API starting: environment=%s timezone=%s",
            container.settings.environment,
            container.settings.timezone,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Life Dashboard", lifespan=lifespan)
    app.state.container = container
    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
