"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs:
- Destination URLs submitted to /shorten and /lengthen
- Tokens taken from request paths

Security Considerations:
- Only http and https destinations are accepted (no javascript:, data:, file:)
- Tokens are restricted to the generator alphabet before reaching the store
"""

import re
from typing import Optional
from urllib.parse import urlsplit

ALLOWED_SCHEMES = frozenset({"http", "https"})

_TOKEN_PATTERN = re.compile(r"^[0-9a-zA-Z]+$")


def is_valid_url(url: str) -> bool:
    """
    Check that ``url`` is an absolute http(s) URL with a non-empty host.

    Args:
        url: The URL string to validate

    Returns:
        True if valid, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    # Whitespace is never part of a well-formed URL
    if any(char.isspace() for char in url):
        return False

    try:
        result = urlsplit(url)
        # Accessing port validates it (raises ValueError when out of range)
        result.port
    except ValueError:
        return False

    if result.scheme not in ALLOWED_SCHEMES:
        return False

    return bool(result.hostname)


def sanitize_token(token: str) -> Optional[str]:
    """
    Sanitize and validate token format.

    Tokens only contain base62 characters: [0-9a-zA-Z]. Anything else cannot
    have been issued by this service.

    Args:
        token: The token to sanitize

    Returns:
        Sanitized token if valid, None otherwise
    """
    if not token or not isinstance(token, str):
        return None

    token = token.strip()

    if not _TOKEN_PATTERN.match(token):
        return None

    return token
