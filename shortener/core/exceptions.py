"""
Custom Exceptions

This module defines the two exception families used by the service:

- Store errors: raised by URL store implementations and consumed by the
  URL service. Never serialized to clients.
- API errors: raised by the URL service and the HTTP layer. Each carries an
  error type (which selects the HTTP status), a stable machine-readable code,
  a message that is safe to display, and a debug string that is logged but
  never sent to clients.
"""

from enum import Enum
from typing import Any, Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class StoreError(URLShortenerException):
    """Raised when a URL store operation fails unexpectedly."""

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        self.original_error = original_error
        super().__init__(message)


class TokenAlreadyExistsError(StoreError):
    """Raised when creating a link whose token is already stored."""

    def __init__(self, token: str, original_error: Optional[BaseException] = None):
        self.token = token
        super().__init__(f"Token '{token}' already exists", original_error)


class LinkNotFoundError(StoreError):
    """Raised when no link is stored under a token."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Token '{token}' not found")


class StaleLinkError(StoreError):
    """Raised when an update would not raise the stored visit count."""

    def __init__(self, token: str, stored_visits: Optional[int] = None):
        self.token = token
        self.stored_visits = stored_visits
        super().__init__(f"Token '{token}' was updated concurrently")


class ErrorType(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"
    BAD_REQUEST = "BAD_REQUEST"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"


STATUS_CODES = {
    ErrorType.NOT_FOUND: 404,
    ErrorType.INTERNAL: 500,
    ErrorType.BAD_REQUEST: 400,
    ErrorType.UNSUPPORTED_MEDIA_TYPE: 415,
    ErrorType.PAYLOAD_TOO_LARGE: 413,
    ErrorType.TOO_MANY_REQUESTS: 429,
}

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


class APIError(URLShortenerException):
    """
    Error returned to API consumers.

    Attributes:
        error_type: Category of the error, mapped to an HTTP status
        code: Stable code for programmatic handling
        message: Human readable message, safe to display
        action: Optional hint on how to resolve the error
        debug: Internal detail, logged but never serialized
    """

    error_type: ErrorType = ErrorType.INTERNAL

    def __init__(
        self,
        code: str,
        message: str = "",
        action: Optional[str] = None,
        debug: Optional[str] = None,
        error_type: Optional[ErrorType] = None,
    ):
        if error_type is not None:
            self.error_type = error_type
        self.code = code
        self.message = message
        self.action = action
        self.debug = debug
        super().__init__(message or code)

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.error_type, 500)

    def to_dict(self) -> dict[str, Any]:
        body = {
            "type": self.error_type.value,
            "code": self.code,
            "message": self.message,
        }
        if self.action:
            body["action"] = self.action
        return body


class InvalidInputError(APIError):
    """Raised when request input, such as a destination URL, is malformed."""
    error_type = ErrorType.BAD_REQUEST


class NotFoundError(APIError):
    """Raised when a token does not resolve to a link."""
    error_type = ErrorType.NOT_FOUND


class InternalError(APIError):
    """Raised for storage, transport or otherwise unexpected faults."""
    error_type = ErrorType.INTERNAL

    def __init__(self, code: str, message: str = INTERNAL_ERROR_MESSAGE, **kwargs):
        super().__init__(code, message, **kwargs)


class MissingLinkError(InternalError):
    """Raised when a visit increment is requested without a link."""

    def __init__(self):
        super().__init__("missing-link", debug="increment_visits called without a link")


class PayloadTooLargeError(APIError):
    error_type = ErrorType.PAYLOAD_TOO_LARGE


class UnsupportedMediaTypeError(APIError):
    error_type = ErrorType.UNSUPPORTED_MEDIA_TYPE


class RateLimitedError(APIError):
    error_type = ErrorType.TOO_MANY_REQUESTS


def ensure_api_error(exc: BaseException) -> APIError:
    """Return ``exc`` if it is an APIError, otherwise wrap it as an internal one."""
    if isinstance(exc, APIError):
        return exc
    return InternalError("unknown", debug=str(exc))
