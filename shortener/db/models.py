"""
Database Models for URL Shortener Service

This module defines the SQLModel schemas for short links:
- ShortLink: the domain record exchanged between stores, service and API
- ShortLinkRecord: the table model backing the relational store

Design Decisions:
- The token is the primary key (no surrogate id); uniqueness is enforced by
  the database itself
- Tokens use Text rather than a sized String because long tokens grow with
  the destination URL
- Index on created_at for time-based queries
- created_at is always timezone-aware UTC, whatever the backend stores
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime column stored as UTC.

    SQLite has no timezone support and hands back naive values, so results
    are tagged as UTC again on the way out.
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class ShortLink(SQLModel):
    """
    A token and the destination it resolves to.

    Only visit_count changes after creation, and only through
    URLService.increment_visits.
    """
    token: str
    destination_url: str
    visit_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)


class ShortLinkRecord(ShortLink, table=True):
    """
    Table storing token to destination mappings.

    Fields mirror ShortLink; the relational store reads and writes this table
    with Core statements and hands ShortLink values back to callers.
    """
    __tablename__ = "short_links"

    token: str = Field(sa_column=Column(Text, primary_key=True))
    destination_url: str = Field(sa_column=Column(Text, nullable=False))
    visit_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime(timezone=True), nullable=False, index=True)
    )


short_links_table = ShortLinkRecord.__table__
