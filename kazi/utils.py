"""
Phone and text helpers shared by the auth flow and the dashboard.
"""

import re
from typing import Any, Optional
from urllib.parse import quote

KENYA_COUNTRY_CODE = "254"

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}


def as_text(value: Any) -> str:
    """Form input as a string; None becomes empty, numbers are stringified."""
    return "" if value is None else str(value)


def format_phone_to_standard(phone: Optional[str]) -> str:
    """
    Normalize a Kenyan phone number to the backend's canonical form.

    Non-digits are stripped first. ``07XXXXXXXX`` becomes ``2547XXXXXXXX``,
    numbers already starting with ``254`` are kept, and anything else gets
    the ``254`` prefix.

    Examples:
        >>> format_phone_to_standard("0712 345 678")
        '254712345678'
        >>> format_phone_to_standard("+254712345678")
        '254712345678'
    """
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        return ""
    if digits.startswith("0"):
        return KENYA_COUNTRY_CODE + digits[1:]
    if digits.startswith(KENYA_COUNTRY_CODE):
        return digits
    return KENYA_COUNTRY_CODE + digits


def escape_html(text: Optional[str]) -> str:
    """Escape text for safe interpolation into HTML."""
    if not text:
        return ""
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in str(text))


def truncate(text: Optional[str], limit: int = 100) -> str:
    """First ``limit`` characters followed by an ellipsis."""
    return (text or "")[:limit] + "..."


def encode_uri_component(text: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(text, safe=_URI_COMPONENT_SAFE)
