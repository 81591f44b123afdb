"""
Data Access Layer (DAL) for the catalog and user services.

Products and categories live in MongoDB (pymongo); users, refresh tokens and
audit logs live in PostgreSQL (SQLAlchemy). Each Lambda owns one connection
manager that the request boundary asks to ensure connectivity before the
route handler runs.
"""

from typing import Protocol, runtime_checkable

from service.handlers.utils.errors import InternalError


class DatabaseConnectionError(InternalError):
    """Raised when a database connection cannot be established."""


@runtime_checkable
class ConnectionManager(Protocol):
    """Protocol shared by the document and relational connection managers."""

    def ensure_connection(self) -> None:
        """Connect if there is no live connection; no-op otherwise."""
        ...

    def is_connected(self) -> bool:
        """Whether the underlying client currently has a usable connection."""
        ...


__all__ = [
    'ConnectionManager',
    'DatabaseConnectionError',
]
