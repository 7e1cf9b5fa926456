"""FastAPI application for branchsweep."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from branchsweep import __version__
from branchsweep.api.routers import repositories
from branchsweep.core.service import BranchSweeper

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting branchsweep API v{__version__}")
    yield
    sweeper = getattr(app.state, "sweeper", None)
    if sweeper is not None:
        sweeper.client.close()
    logger.info("Shutting down branchsweep API")


def create_app(sweeper: Optional[BranchSweeper] = None) -> FastAPI:
    """Build the API application.

    Args:
        sweeper: Sweeper to serve requests with. If None, one is built from the
            user's configuration on the first request.
    """
    app = FastAPI(
        title="branchsweep API",
        description="Bulk archive and delete repository branches",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.sweeper = sweeper

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        repositories.router, prefix="/api/v1/repositories", tags=["repositories"]
    )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"name": "branchsweep API", "version": __version__, "status": "running"}

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
