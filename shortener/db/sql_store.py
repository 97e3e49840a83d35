"""
Relational URL Store

Persists links in the ``short_links`` table through an async SQLAlchemy
engine (SQLite via aiosqlite by default).

Transaction discipline:
- Every operation opens its own session; the session and its connection are
  released before the operation returns, on every exit path
- Writes run inside session.begin(): the transaction is committed only after
  the statement reports exactly one affected row, and rolled back on any
  error, unexpected row count or cancellation
- update() only matches a row whose stored visit count is below the new
  one; a miss is reported as LinkNotFoundError or StaleLinkError
"""

import logging

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shortener.core.exceptions import (
    LinkNotFoundError,
    StaleLinkError,
    StoreError,
    TokenAlreadyExistsError,
)
from shortener.db.models import ShortLink, short_links_table
from shortener.db.session import build_engine, build_session_maker, create_tables
from shortener.db.store import URLStore

logger = logging.getLogger(__name__)


def _ensure_single_row(rowcount: int, operation: str) -> None:
    if rowcount != 1:
        raise StoreError(f"{operation}: {rowcount} rows affected, expected 1")


class SQLURLStore(URLStore):
    """URL store backed by a relational table."""

    def __init__(self, database_url: str):
        """
        Args:
            database_url: SQLAlchemy async connection string
        """
        self.database_url = database_url
        self._engine = build_engine(database_url)
        self._session_maker = build_session_maker(self._engine)

    async def initialize(self) -> None:
        try:
            await create_tables(self._engine)
        except SQLAlchemyError as e:
            raise StoreError("Failed to create tables", original_error=e) from e
        logger.info(f"SQL store ready ({self._engine.dialect.name})")

    async def close(self) -> None:
        await self._engine.dispose()

    async def create(self, link: ShortLink) -> None:
        statement = insert(short_links_table).values(
            token=link.token,
            destination_url=link.destination_url,
            visit_count=link.visit_count,
            created_at=link.created_at,
        )
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    result = await session.execute(statement)
                    _ensure_single_row(result.rowcount, "create")
        except IntegrityError as e:
            raise TokenAlreadyExistsError(link.token, original_error=e) from e
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create link: {e}", original_error=e) from e

    async def find_by_token(self, token: str) -> ShortLink:
        statement = select(short_links_table).where(short_links_table.c.token == token)
        try:
            async with self._session_maker() as session:
                result = await session.execute(statement)
                row = result.mappings().first()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to find link: {e}", original_error=e) from e

        if row is None:
            raise LinkNotFoundError(token)
        return ShortLink(**row)

    async def update(self, link: ShortLink) -> None:
        statement = (
            update(short_links_table)
            .where(short_links_table.c.token == link.token)
            .where(short_links_table.c.visit_count < link.visit_count)
            .values(destination_url=link.destination_url, visit_count=link.visit_count)
        )
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    result = await session.execute(statement)
                    if result.rowcount == 0:
                        # Same transaction: tells a vanished row from a newer count
                        stored_visits = await session.scalar(
                            select(short_links_table.c.visit_count)
                            .where(short_links_table.c.token == link.token)
                        )
                        if stored_visits is None:
                            raise LinkNotFoundError(link.token)
                        raise StaleLinkError(link.token, stored_visits)
                    _ensure_single_row(result.rowcount, "update")
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update link: {e}", original_error=e) from e

    async def list_all(self) -> list[ShortLink]:
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(short_links_table))
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list links: {e}", original_error=e) from e

        return [ShortLink(**row) for row in rows]
