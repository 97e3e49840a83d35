"""
URL Shortening Service

This service handles the core business logic for URL shortening:
- Validating destination URLs
- Generating random tokens and storing links, retrying on token collisions
- Looking up links and accounting for visits

Design Decisions:
- Random tokens: uniform draws from [a-zA-Z0-9]; uniqueness is enforced by
  the store, and a collision is retried with a fresh token
- Bounded retry: after MAX_CREATE_ATTEMPTS collisions the request fails as an
  internal error (three collisions in a row at length 6 means something is
  wrong with the store or the random source)
- Store errors never leak: callers only see APIError subclasses, with the
  underlying fault kept in the debug field
- Visits are persisted as read-modify-write; a write based on an outdated
  count is refused by the store and rebased on the stored count
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from shortener.core.exceptions import (
    InternalError,
    InvalidInputError,
    LinkNotFoundError,
    MissingLinkError,
    NotFoundError,
    StaleLinkError,
    TokenAlreadyExistsError,
)
from shortener.core.tokens import TokenGenerator
from shortener.core.validators import is_valid_url
from shortener.db.models import ShortLink
from shortener.db.store import URLStore

logger = logging.getLogger(__name__)

SHORT_TOKEN_LENGTH = 6
MIN_LONG_TOKEN_LENGTH = 42
LONG_TOKEN_SCALE_FACTOR = 2
MAX_CREATE_ATTEMPTS = 3
MAX_VISIT_UPDATE_ATTEMPTS = 10


class URLService:
    """
    Facade consumed by the HTTP layer.

    Depends only on the URLStore interface, so any store implementation can
    be injected.
    """

    def __init__(
        self,
        store: URLStore,
        token_generator: Optional[TokenGenerator] = None,
        *,
        short_token_length: int = SHORT_TOKEN_LENGTH,
        min_long_token_length: int = MIN_LONG_TOKEN_LENGTH,
        long_token_scale_factor: int = LONG_TOKEN_SCALE_FACTOR,
        max_create_attempts: int = MAX_CREATE_ATTEMPTS,
        max_visit_update_attempts: int = MAX_VISIT_UPDATE_ATTEMPTS,
    ):
        """
        Initialize the URL service.

        Args:
            store: Store holding the canonical links
            token_generator: Source of random tokens
            short_token_length: Token length used by shorten()
            min_long_token_length: Lower bound on tokens produced by lengthen()
            long_token_scale_factor: lengthen() tokens are this many times
                the length of the destination URL
            max_create_attempts: Attempts at storing a link before giving up
            max_visit_update_attempts: Attempts at persisting a visit when
                concurrent visits keep moving the stored count
        """
        self.store = store
        self.token_generator = token_generator or TokenGenerator()
        self.short_token_length = short_token_length
        self.min_long_token_length = min_long_token_length
        self.long_token_scale_factor = long_token_scale_factor
        self.max_create_attempts = max_create_attempts
        self.max_visit_update_attempts = max_visit_update_attempts

    def long_token_length(self, url: str) -> int:
        return max(self.min_long_token_length, self.long_token_scale_factor * len(url))

    async def shorten(self, url: str) -> ShortLink:
        """
        Create a link with a short token.

        Raises:
            InvalidInputError: If url is not an absolute http(s) URL
            InternalError: If the link could not be stored
        """
        return await self._create_link(url, self.short_token_length, "couldnt-shorten")

    async def lengthen(self, url: str) -> ShortLink:
        """
        Create a link with a deliberately oversized token.

        Same protocol as shorten(), with the token sized by long_token_length().
        """
        return await self._create_link(url, self.long_token_length(url), "couldnt-lengthen")

    async def _create_link(self, url: str, token_length: int, error_code: str) -> ShortLink:
        if not is_valid_url(url):
            raise InvalidInputError(
                "invalid-url",
                f"The provided URL ({url}) is invalid.",
                action="Provide an absolute http:// or https:// URL with a host.",
            )

        created_at = datetime.now(timezone.utc)
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_create_attempts + 1):
            link = ShortLink(
                token=self.token_generator.generate(token_length),
                destination_url=url,
                created_at=created_at,
            )
            try:
                await self.store.create(link)
            except TokenAlreadyExistsError as e:
                logger.warning(
                    f"Token collision on attempt {attempt}/{self.max_create_attempts} "
                    f"(length {token_length})"
                )
                last_error = e
                continue
            except Exception as e:
                error = InternalError(error_code, debug=str(e))
                logger.error(f"Failed to store link: {e}", exc_info=True)
                raise error from e
            return link

        error = InternalError(error_code, debug=str(last_error))
        logger.error(
            f"Giving up after {self.max_create_attempts} token collisions: {last_error}"
        )
        raise error from last_error

    async def find_by_token(self, token: str) -> ShortLink:
        """
        Find the link stored under ``token``.

        Raises:
            NotFoundError: If no link uses the token
            InternalError: If the store failed
        """
        try:
            return await self.store.find_by_token(token)
        except LinkNotFoundError as e:
            raise NotFoundError(
                "url-not-found",
                f"Couldn't find URL with token ({token}).",
            ) from e
        except Exception as e:
            logger.error(f"Couldn't retrieve URL for token {token}: {e}", exc_info=True)
            raise InternalError("internal-error-url-not-found", debug=str(e)) from e

    async def increment_visits(self, link: Optional[ShortLink]) -> None:
        """
        Count one visit of ``link`` and persist it.

        The count is incremented on ``link`` itself before it is persisted. If
        the store already holds a higher count (another visit of the same
        token was recorded since ``link`` was read), the increment is rebased
        on the stored count and retried, so concurrent visits are never lost.
        If persisting fails for any reason, including cancellation, ``link``
        keeps its original count before the error propagates.

        Raises:
            MissingLinkError: If link is None
            NotFoundError: If the link is no longer stored
            InternalError: If the store failed
        """
        if link is None:
            raise MissingLinkError()

        original_count = link.visit_count
        link.visit_count += 1
        persisted = False
        try:
            for attempt in range(1, self.max_visit_update_attempts + 1):
                try:
                    await self.store.update(link)
                    persisted = True
                    return
                except StaleLinkError as e:
                    logger.debug(
                        f"Visit count for {link.token} moved to {e.stored_visits} "
                        f"(attempt {attempt}/{self.max_visit_update_attempts})"
                    )
                    last_error = e
                    link.visit_count = e.stored_visits + 1
            raise last_error
        except LinkNotFoundError as e:
            raise NotFoundError(
                "url-not-found",
                f"Couldn't find URL with token ({link.token}).",
            ) from e
        except Exception as e:
            logger.error(f"Failed to record visit for {link.token}: {e}", exc_info=True)
            raise InternalError("couldnt-increment-visits", debug=str(e)) from e
        finally:
            if not persisted:
                link.visit_count = original_count

    async def list_all(self) -> list[ShortLink]:
        try:
            return await self.store.list_all()
        except Exception as e:
            logger.error(f"Failed to list links: {e}", exc_info=True)
            raise InternalError("couldnt-list-urls", debug=str(e)) from e
