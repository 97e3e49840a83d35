"""
Database module with storage abstraction layer.

This module provides:
- URLStore interface: Abstract base class for URL stores
- InMemoryURLStore: dict-backed store guarded by a reader/writer lock
- SQLURLStore: relational store (SQLite by default)
- DatabaseAdapter interface: dialect-specific engine configuration

To add a new storage backend:
1. Create a new class inheriting from URLStore
2. Implement all abstract methods
3. Select it in build_store() below
"""

from shortener.core.setting import Settings, StoreBackend
from shortener.db.interface import DatabaseAdapter
from shortener.db.memory_store import InMemoryURLStore
from shortener.db.models import ShortLink
from shortener.db.sql_store import SQLURLStore
from shortener.db.store import URLStore

__all__ = [
    "DatabaseAdapter",
    "InMemoryURLStore",
    "SQLURLStore",
    "ShortLink",
    "URLStore",
    "build_store",
]


def build_store(settings: Settings) -> URLStore:
    """Instantiate the URL store selected by ``settings.STORE_BACKEND``."""
    if settings.STORE_BACKEND is StoreBackend.memory:
        return InMemoryURLStore()
    return SQLURLStore(settings.DATABASE_URL)
