"""Tests for token generation, URL validation and QR code links."""

import random

import pytest

from shortener.core.tokens import ALPHABET, TokenGenerator, generate_token
from shortener.core.validators import is_valid_url, sanitize_token
from shortener.services.qr_code import build_qr_code_link


class TestTokenGenerator:
    """Test random token generation."""

    def test_alphabet_has_62_symbols(self):
        assert len(ALPHABET) == 62
        assert len(set(ALPHABET)) == 62
        assert ALPHABET.isalnum()

    @pytest.mark.parametrize("length", [1, 6, 42, 500])
    def test_generate_length(self, length):
        assert len(generate_token(length)) == length

    def test_generate_uses_alphabet_only(self):
        token = generate_token(2000)
        assert set(token) <= set(ALPHABET)

    def test_non_positive_length_gives_empty_token(self):
        assert generate_token(0) == ""
        assert generate_token(-3) == ""

    def test_seeded_generators_agree(self):
        first = TokenGenerator(rng=random.Random(42))
        second = TokenGenerator(rng=random.Random(42))
        assert [first.generate(6) for _ in range(5)] == [second.generate(6) for _ in range(5)]

    def test_every_symbol_is_drawn(self):
        generator = TokenGenerator(rng=random.Random(7))
        assert set(generator.generate(10_000)) == set(ALPHABET)


class TestURLValidation:
    """Test URL validation function."""

    def test_valid_urls(self):
        valid_urls = [
            "http://example.com",
            "https://example.com",
            "https://www.example.com/path/to/page",
            "http://subdomain.example.com:8080/path?query=value",
            "http://localhost",
            "https://127.0.0.1/x#fragment",
        ]
        for url in valid_urls:
            assert is_valid_url(url), f"Should be valid: {url}"

    def test_invalid_urls(self):
        invalid_urls = [
            "not-a-url",
            "ftp://example.com",
            "example.com",
            "",
            "http://",
            "https:///path-only",
            "javascript:alert(1)",
            "http://exa mple.com",
            "http://example.com:99999",
            "//example.com",
        ]
        for url in invalid_urls:
            assert not is_valid_url(url), f"Should be invalid: {url}"

    def test_non_string_is_invalid(self):
        assert not is_valid_url(None)
        assert not is_valid_url(42)


class TestSanitizeToken:

    def test_accepts_alphanumeric(self):
        assert sanitize_token("aB3xYz") == "aB3xYz"
        assert sanitize_token("a" * 200) == "a" * 200

    def test_rejects_other_characters(self):
        for token in ["", "abc-def", "abc def", "../etc", "favicon.ico", "tok%20"]:
            assert sanitize_token(token) is None, token


def test_qr_code_link_escapes_url():
    link = build_qr_code_link("https://example.com/a b?x=1&y=2")
    assert link == (
        "https://api.qrserver.com/v1/create-qr-code/"
        "?data=https%3A%2F%2Fexample.com%2Fa+b%3Fx%3D1%26y%3D2"
    )


def test_qr_code_link_custom_api():
    assert build_qr_code_link("http://a.io", "https://qr.test/") == "https://qr.test/?data=http%3A%2F%2Fa.io"
