"""
QR Code Links

Responses carry a link to an external QR code renderer rather than an
image, so no imaging library is needed and response bodies stay small.
"""

from urllib.parse import quote_plus

DEFAULT_QR_CODE_API_URL = "https://api.qrserver.com/v1/create-qr-code/"


def build_qr_code_link(url: str, api_url: str = DEFAULT_QR_CODE_API_URL) -> str:
    """
    Return a link rendering ``url`` as a QR code.

    Example:
        build_qr_code_link("https://example.com")
        -> "https://api.qrserver.com/v1/create-qr-code/?data=https%3A%2F%2Fexample.com"
    """
    return f"{api_url}?data={quote_plus(url)}"
