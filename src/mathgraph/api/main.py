"""FastAPI application for Mathgraph API.

Provides endpoints for loading a dependency graph of mathematical
statements and exploring it by traversal, search and filters.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mathgraph.api.routes import router
from mathgraph.config import settings
from mathgraph.graph import GraphStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    logger.info("Starting Mathgraph API...")

    store = GraphStore()

    if settings.dataset_path:
        try:
            store.load_file(settings.dataset_path)
        except (OSError, ValueError) as e:
            # FormatError and JSONDecodeError are both ValueErrors
            logger.error(f"Failed to load {settings.dataset_path}: {e}; using demo graph")
            store.load_demo()
    else:
        logger.info("No dataset configured, using demo graph")
        store.load_demo()

    # Store graph store in app state for routes
    app.state.store = store

    yield

    logger.info("Shutting down Mathgraph API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Mathgraph",
        description="Dependency graph explorer for mathematical documents",
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

    app.include_router(router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "mathgraph.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
