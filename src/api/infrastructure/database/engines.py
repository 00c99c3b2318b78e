"""Database engine creation for async SQLAlchemy.

Factory functions for the read and write engines of the tenancy store
(PostgreSQL via asyncpg).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "create_write_engine",
    "create_read_engine",
    "build_async_url",
    "engine_options",
]


def engine_options(settings: DatabaseSettings) -> dict[str, Any]:
    """Pool options shared by both engines.

    The pool is sized strictly from ``pool_max_connections`` with no overflow.
    """
    return {
        "pool_size": settings.pool_max_connections,
        "max_overflow": 0,
        "pool_pre_ping": True,
        "echo": False,
    }


def create_write_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create async engine for write operations.

    Args:
        settings: Database connection settings

    Returns:
        Configured async engine for write operations
    """
    return create_async_engine(build_async_url(settings), **engine_options(settings))


def create_read_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create async engine for read-only operations.

    Shares the write engine's pool settings; it may point at a replica in
    production. Read-only enforcement is left to database role permissions.
    """
    return create_async_engine(
        build_async_url(settings),
        execution_options={"postgresql_readonly": True},
        **engine_options(settings),
    )


def build_async_url(settings: DatabaseSettings) -> URL:
    """Build the asyncpg database URL.

    Credentials go through SQLAlchemy's URL builder so special characters are
    escaped when rendered.

    Args:
        settings: Database connection settings

    Returns:
        ``postgresql+asyncpg`` URL object
    """
    return URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
