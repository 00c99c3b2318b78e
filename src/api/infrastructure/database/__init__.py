"""Database infrastructure - async SQLAlchemy engines, sessions and base models."""

from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
    get_write_session,
)
from infrastructure.database.models import Base, CreatedAtMixin, TimestampMixin

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "close_database_connections",
    "get_read_session",
    "get_write_session",
]
