"""Infrastructure layer for cross-cutting concerns."""

from .database import close_db, connect_db, get_database, init_indexes

__all__ = [
    "connect_db",
    "close_db",
    "get_database",
    "init_indexes",
]
