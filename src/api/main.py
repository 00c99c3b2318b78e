"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from infrastructure.database import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from tenancy.presentation import router as tenancy_router


@asynccontextmanager
async def tenancy_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration on startup
    - Database engine disposal on shutdown (engines are created lazily)
    """
    configure_logging(get_settings().log_level)
    yield
    await close_database_connections()


app = FastAPI(
    title="Tenancy API",
    description="Organizations, departments and integration configuration",
    version=__version__,
    lifespan=tenancy_lifespan,
)

app.include_router(tenancy_router)


@app.get("/health")
def health() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "version": __version__}
