"""
Token Generation

Tokens are random strings drawn uniformly from a 62 character alphabet
([a-zA-Z0-9]), which keeps them URL-safe without any escaping.

Uniqueness is not the generator's concern: the URL service retries with a
fresh token whenever the store reports a collision.
"""

import random
import string
from typing import Optional

ALPHABET = string.ascii_letters + string.digits


class TokenGenerator:
    """Generate random fixed-length tokens."""

    def __init__(self, alphabet: str = ALPHABET, rng: Optional[random.Random] = None):
        """
        Args:
            alphabet: Characters tokens are drawn from
            rng: Random source, mainly so tests can seed it
        """
        self.alphabet = alphabet
        self._rng = rng or random.Random()

    def generate(self, length: int) -> str:
        """Return a token of ``length`` characters; empty for length <= 0."""
        if length <= 0:
            return ""
        return "".join(self._rng.choices(self.alphabet, k=length))


_default_generator = TokenGenerator()


def generate_token(length: int) -> str:
    return _default_generator.generate(length)
