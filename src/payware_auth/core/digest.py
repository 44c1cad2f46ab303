"""
Content digests embedded in the token header.
"""

from __future__ import annotations

import base64
import enum
import hashlib
import logging
import warnings
from typing import Any, Optional, Union

from .canonical import serialize_payload

__all__ = [
    "DigestAlgorithm",
    "content_digest",
    "content_md5",
    "content_sha256",
    "resolve_algorithm",
]


class DigestAlgorithm(str, enum.Enum):
    SHA256 = "sha256"
    MD5 = "md5"

    @property
    def header_field(self) -> str:
        """Name of the JWT header claim that carries this digest."""
        return "contentSha256" if self is DigestAlgorithm.SHA256 else "contentMd5"

    @property
    def deprecated(self) -> bool:
        return self is DigestAlgorithm.MD5

    @property
    def label(self) -> str:
        return "SHA-256 (preferred)" if self is DigestAlgorithm.SHA256 else "MD5 (deprecated)"


_ALIASES = {
    "sha256": DigestAlgorithm.SHA256,
    "sha-256": DigestAlgorithm.SHA256,
    "contentsha256": DigestAlgorithm.SHA256,
    "md5": DigestAlgorithm.MD5,
    "contentmd5": DigestAlgorithm.MD5,
}


def resolve_algorithm(value: Union[str, DigestAlgorithm]) -> DigestAlgorithm:
    if isinstance(value, DigestAlgorithm):
        return value
    try:
        return _ALIASES[str(value).strip().lower()]
    except KeyError as exc:
        raise ValueError(
            f"Unsupported content digest algorithm '{value}'. "
            f"Use one of: {', '.join(a.value for a in DigestAlgorithm)}"
        ) from exc


def content_digest(
    value: Any,
    algorithm: Union[str, DigestAlgorithm] = DigestAlgorithm.SHA256,
) -> Optional[str]:
    """
    Base64 digest of the canonical body, or ``None`` when there is no body.

    The hashed string is exactly what :func:`serialize_payload` returns, which
    is the string callers must transmit.
    """
    algorithm = resolve_algorithm(algorithm)
    body = serialize_payload(value)
    if body is None:
        return None

    if algorithm.deprecated:
        warnings.warn(
            "contentMd5 is deprecated, use contentSha256",
            DeprecationWarning,
            stacklevel=2,
        )
    data = body.encode("utf-8")
    if algorithm is DigestAlgorithm.SHA256:
        raw = hashlib.sha256(data).digest()
    else:
        raw = hashlib.md5(data).digest()
    logging.debug("Computed %s content digest over %d bytes", algorithm.value, len(data))
    return base64.b64encode(raw).decode("ascii")


def content_sha256(value: Any) -> Optional[str]:
    return content_digest(value, DigestAlgorithm.SHA256)


def content_md5(value: Any) -> Optional[str]:
    return content_digest(value, DigestAlgorithm.MD5)
