"""
Deterministic JSON serialization for request bodies.

The string returned by :func:`serialize_payload` is both the input of the
content digest and the literal HTTP body. Object keys are sorted at every
level and no whitespace is emitted, so two equal values always produce the
same bytes regardless of how they were built.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Optional

__all__ = [
    "canonicalize",
    "is_absent",
    "is_consistent",
    "serialize_payload",
]

_SEPARATORS = (",", ":")
_LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")


def canonicalize(value: Any) -> str:
    """
    Return the canonical compact JSON encoding of ``value``.

    Arrays keep their element order; only object keys are reordered.
    ``None`` encodes as ``null``. Non-ASCII text is kept as UTF-8 rather than
    ``\\u`` escaped, except unpaired surrogates, which cannot be encoded and
    are written as ``\\uXXXX``. NaN and infinities raise :class:`ValueError`.
    """
    text = json.dumps(
        value,
        sort_keys=True,
        separators=_SEPARATORS,
        ensure_ascii=False,
        allow_nan=False,
    )
    return _LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def is_absent(value: Any) -> bool:
    """
    A body is absent when it is falsy as a scalar: ``None``, ``""``,
    ``False``, zero or NaN. Empty objects and arrays are still bodies.
    """
    if value is None:
        return True
    if isinstance(value, (str, bool, int, float)):
        if isinstance(value, float) and math.isnan(value):
            return True
        return not value
    return False


def serialize_payload(value: Any) -> Optional[str]:
    """
    Return the exact string to send as the request body.

    Strings are trusted to be canonical already and are returned unchanged.
    """
    if is_absent(value):
        return None
    if isinstance(value, str):
        return value
    return canonicalize(value)


def is_consistent(first: Any, second: Any) -> bool:
    return canonicalize(first) == canonicalize(second)
