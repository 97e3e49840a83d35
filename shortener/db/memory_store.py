"""
In-Memory URL Store

Keeps links in a dict guarded by a single reader/writer lock:
- create() and update() hold the writer lock; update() only accepts a
  visit count above the stored one
- find_by_token() and list_all() hold the reader lock

Records are copied on the way in and on the way out, so callers can never
mutate the stored record except through update().
"""

import logging

from aiorwlock import RWLock

from shortener.core.exceptions import LinkNotFoundError, StaleLinkError, TokenAlreadyExistsError
from shortener.db.models import ShortLink
from shortener.db.store import URLStore

logger = logging.getLogger(__name__)


class InMemoryURLStore(URLStore):
    """URL store backed by a process-local dict."""

    def __init__(self):
        self._links: dict[str, ShortLink] = {}
        self._lock = RWLock()

    async def create(self, link: ShortLink) -> None:
        async with self._lock.writer_lock:
            if link.token in self._links:
                raise TokenAlreadyExistsError(link.token)
            self._links[link.token] = link.model_copy()
        logger.debug(f"Stored link {link.token}")

    async def find_by_token(self, token: str) -> ShortLink:
        async with self._lock.reader_lock:
            link = self._links.get(token)
            if link is None:
                raise LinkNotFoundError(token)
            return link.model_copy()

    async def update(self, link: ShortLink) -> None:
        async with self._lock.writer_lock:
            stored = self._links.get(link.token)
            if stored is None:
                raise LinkNotFoundError(link.token)
            if link.visit_count <= stored.visit_count:
                raise StaleLinkError(link.token, stored.visit_count)
            self._links[link.token] = link.model_copy()

    async def list_all(self) -> list[ShortLink]:
        async with self._lock.reader_lock:
            return [link.model_copy() for link in self._links.values()]
