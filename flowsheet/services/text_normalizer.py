from __future__ import annotations

import json
from typing import Any

"""Text rendering and corrective re-encoding for exported cell values.

normalize_text() round-trips a value through the same encoding on both legs.
For any correctly decoded text this returns the text unchanged; characters the
encoding cannot represent (e.g. lone surrogates from JSON escapes) are replaced,
after which the result is stable. It does not repair text that was decoded
with the wrong charset upstream.
"""

__all__ = [
    "DEFAULT_ENCODING",
    "normalize_text",
    "to_text",
]

DEFAULT_ENCODING = "utf-8"


def to_text(value: Any) -> str:
    """Render a decoded JSON value as cell text.

    Strings pass through, None is empty, everything else (numbers, booleans,
    nested objects) is rendered as compact JSON so `true` stays `true`.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, sort_keys=True)


def normalize_text(text: Any, encoding: str = DEFAULT_ENCODING) -> str:
    """Return `text` re-encoded and decoded with `encoding`.

    Idempotent: normalize_text(normalize_text(x)) == normalize_text(x).
    None becomes an empty string; other non-strings are stringified first.
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    return text.encode(encoding, errors="replace").decode(encoding, errors="replace")
