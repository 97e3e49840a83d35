"""
Database Engine and Session Management

This module builds async SQLAlchemy engines and session factories for the
relational URL store. The dialect-specific configuration comes from the
database adapter matching the connection URL.

Key Features:
- Database abstraction: engine options live in the adapters
- Async session management: one session per store operation
- Schema creation from the SQLModel metadata at startup
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from shortener.db import models  # noqa: F401  registers tables on SQLModel.metadata
from shortener.db.sqlite_adapter import get_database_adapter


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine configured by the adapter for ``database_url``."""
    db_adapter = get_database_adapter(database_url)
    return db_adapter.create_engine(database_url)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create an async session factory bound to ``engine``.

    expire_on_commit=False keeps attributes loaded after commit, since
    sessions are closed as soon as an operation returns.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables known to SQLModel that do not exist yet."""
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
