from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

"""JD link normalization and WhatsApp deep link encoding.

Deep link wire format: https://wa.me/<digits>?text=<percent-encoded message>
"""

__all__ = [
    "WA_BASE_URL",
    "normalize_link",
    "encode_message",
    "build_message_link",
]

WA_BASE_URL = "https://wa.me/"

# encodeURIComponent unreserved set: keeps *bold* markers readable in the link
_URI_COMPONENT_SAFE = "-_.!~*'()"
_WHITESPACE = re.compile(r"\s+")
_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def normalize_link(raw: Any) -> str:
    """Ensure a URL-like value carries an http(s) scheme.

    Only scheme presence is guaranteed; hosts are not validated.
    """
    text = "" if raw is None else str(raw).strip()
    if not text:
        return ""
    cleaned = _WHITESPACE.sub("", text)
    if _SCHEME.match(cleaned):
        return cleaned
    return f"https://{cleaned}"


def encode_message(message: str) -> str:
    # space -> %20, newline -> %0A
    return quote(message, safe=_URI_COMPONENT_SAFE)


def build_message_link(phone: str, message: str) -> str:
    if not phone:
        return ""
    return f"{WA_BASE_URL}{phone}?text={encode_message(message or '')}"
