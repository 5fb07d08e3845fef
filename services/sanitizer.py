"""
Escape HTML-significant characters in free text before it is stored or
interpolated into an email body.
"""
from __future__ import annotations

from typing import Any, Optional

# "&" is left alone: the produced entities contain none of these characters,
# so a second pass leaves already-escaped text unchanged.
_ESCAPES = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
})


def sanitize(text: Optional[str]) -> str:
    if not text:
        return ""
    return str(text).translate(_ESCAPES).strip()


def sanitize_fields(data: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    """Return a copy of data with the named string fields sanitized."""
    out = dict(data)
    for name in fields:
        value = out.get(name)
        if value is None or isinstance(value, str):
            out[name] = sanitize(value)
    return out
