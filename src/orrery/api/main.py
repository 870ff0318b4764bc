"""FastAPI application for the Orrery layout service.

Serves pre-computed 3D layouts of entity/relationship snapshots, either
posted directly or fetched from the configured temporal store.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orrery.api.graph import router as graph_router
from orrery.config import settings
from orrery.sources.http import HttpSource

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    logger.info("Starting Orrery API...")

    # Tests may install their own source before startup
    if getattr(app.state, "source", None) is None:
        app.state.source = HttpSource()
        logger.info(f"Using data source at {settings.source_base_url}")

    yield

    logger.info("Shutting down Orrery API...")
    close = getattr(app.state.source, "close", None)
    if close is not None:
        close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Orrery",
        description="3D clustered layout of temporal relationship networks",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(graph_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "orrery.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
