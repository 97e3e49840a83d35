"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration is encapsulated here.

Key characteristics:
- File-based (single .db file), no server required
- Single writer at a time (file locking); concurrent writers wait on the
  busy timeout instead of failing immediately
"""

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from shortener.db.interface import DatabaseAdapter

# Seconds a connection waits for another writer's lock before failing
SQLITE_BUSY_TIMEOUT = 15


class SQLiteAdapter(DatabaseAdapter):
    """SQLite database adapter implementation."""

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.

        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)

        Returns:
            Configured AsyncEngine for SQLite
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        return create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    def get_pool_class(self) -> type[NullPool]:
        """
        SQLite uses NullPool: a fresh connection per session, so every store
        operation owns its connection and transaction for its whole lifetime.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False,
            "timeout": SQLITE_BUSY_TIMEOUT,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def get_dialect_name(self) -> str:
        return "sqlite"


# Adapters are stateless, so one instance per dialect is shared
_ADAPTERS: dict[str, DatabaseAdapter] = {
    adapter.get_dialect_name(): adapter
    for adapter in (SQLiteAdapter(),)
}


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function returning the adapter for the URL's dialect.

    Raises:
        ValueError: If no adapter supports the dialect
    """
    dialect = make_url(database_url).get_backend_name()
    try:
        return _ADAPTERS[dialect]
    except KeyError:
        raise ValueError(f"Unsupported database dialect: {dialect}") from None
