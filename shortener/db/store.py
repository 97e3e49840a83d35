"""
URL Store Interface

A URL store persists token to ShortLink mappings. The URL service depends
only on this interface, so the in-memory and relational implementations are
interchangeable (and tests can substitute their own).

Contract shared by every implementation:
- Tokens are unique; create() never overwrites an existing record
- Stores own the canonical records and hand out copies
- Every operation is a coroutine and may be cancelled; cancellation never
  leaves a lock held or a transaction open
"""

from abc import ABC, abstractmethod

from shortener.db.models import ShortLink


class URLStore(ABC):
    """Abstract base class for URL stores."""

    async def initialize(self) -> None:
        """Prepare the store for use (e.g. create tables). No-op by default."""

    async def close(self) -> None:
        """Release resources held by the store. No-op by default."""

    @abstractmethod
    async def create(self, link: ShortLink) -> None:
        """
        Insert a new link.

        Raises:
            TokenAlreadyExistsError: If link.token is already stored
            StoreError: For any other storage fault
        """

    @abstractmethod
    async def find_by_token(self, token: str) -> ShortLink:
        """
        Return the link stored under ``token``.

        Raises:
            LinkNotFoundError: If no link uses the token
            StoreError: For any other storage fault
        """

    @abstractmethod
    async def update(self, link: ShortLink) -> None:
        """
        Replace the stored record matching link.token.

        The write is accepted only if link.visit_count is greater than the
        stored count, so a caller holding an outdated copy can never move the
        count backwards or overwrite a concurrent increment.

        Raises:
            LinkNotFoundError: If no link uses the token
            StaleLinkError: If the stored count is already at or above
                link.visit_count
            StoreError: For any other storage fault
        """

    @abstractmethod
    async def list_all(self) -> list[ShortLink]:
        """Return every stored link, in no particular order."""
