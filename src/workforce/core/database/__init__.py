"""Database layer - session management, base models, and mixins."""

from workforce.core.database.base import (
    Base,
    IntIDMixin,
    OwnedByUserMixin,
    TimestampMixin,
)
from workforce.core.database.session import get_db, get_engine, get_session_factory


__all__ = [
    "Base",
    "IntIDMixin",
    "OwnedByUserMixin",
    "TimestampMixin",
    "get_db",
    "get_engine",
    "get_session_factory",
]
