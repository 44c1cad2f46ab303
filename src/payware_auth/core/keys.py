"""
RSA key material handling.

Keys arrive as text in several shapes: full PEM with ``PRIVATE KEY`` or
``RSA PRIVATE KEY`` delimiters, PEM mangled by copy/paste or environment
variables (``\\r\\n``, indentation, a single line), or bare base64 content.
Everything is normalized to a 64-column PEM before it reaches the signer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import InvalidKeyError, SigningError

__all__ = [
    "KeyInfo",
    "RsaKeyPair",
    "generate_rsa_key_pair",
    "is_valid_key_content",
    "key_info",
    "load_private_key",
    "normalize_key",
    "normalize_private_key",
    "normalize_public_key",
]

PEM_LINE_WIDTH = 64
MIN_KEY_SIZE = 2048

_PEM_BLOCK = re.compile(
    r"-----BEGIN ([A-Z0-9 ]+)-----(.*?)-----END \1-----",
    re.DOTALL,
)
_BEGIN_LABEL = re.compile(r"-----BEGIN ([A-Z0-9 ]+)-----")
_PARTIAL_DELIMITER = re.compile(r"-----(?:BEGIN|END)[^-]*-----")
_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/=]")
_BASE64_CONTENT = re.compile(r"^[A-Za-z0-9+/=\s]*$")

_DEFAULT_PRIVATE_LABEL = "PRIVATE KEY"
_DEFAULT_PUBLIC_LABEL = "PUBLIC KEY"


def _wrap(content: str) -> str:
    return "\n".join(
        content[i : i + PEM_LINE_WIDTH] for i in range(0, len(content), PEM_LINE_WIDTH)
    )


def _armor(label: str, content: str) -> str:
    return f"-----BEGIN {label}-----\n{_wrap(content)}\n-----END {label}-----"


def normalize_key(text: Optional[str], *, private: bool = True) -> str:
    """
    Return ``text`` as canonical PEM.

    The label of a BEGIN delimiter is kept even when its END line is missing
    or mismatched, so a PKCS#1 ``RSA PRIVATE KEY`` never turns into PKCS#8.
    Bare base64 content is wrapped in ``PRIVATE KEY`` (or ``PUBLIC KEY``)
    delimiters.
    """
    kind = "Private" if private else "Public"
    if not text or not text.strip():
        raise InvalidKeyError(f"{kind} key is required")

    match = _PEM_BLOCK.search(text)
    if match:
        label = match.group(1)
        content = _NON_BASE64.sub("", match.group(2))
    else:
        begin = _BEGIN_LABEL.search(text)
        if begin:
            label = begin.group(1)
        else:
            label = _DEFAULT_PRIVATE_LABEL if private else _DEFAULT_PUBLIC_LABEL
        content = _NON_BASE64.sub("", _PARTIAL_DELIMITER.sub("", text))

    if not content:
        raise InvalidKeyError(f"{kind} key content is empty after normalization")
    return _armor(label, content)


def normalize_private_key(text: Optional[str]) -> str:
    return normalize_key(text, private=True)


def normalize_public_key(text: Optional[str]) -> str:
    return normalize_key(text, private=False)


def is_valid_key_content(content: Optional[str]) -> bool:
    """Whether ``content`` looks like bare base64 key material."""
    if not content or len(content) < 100:
        return False
    return bool(_BASE64_CONTENT.match(content))


@dataclass(frozen=True)
class KeyInfo:
    format: str
    has_headers: bool
    is_private: bool
    is_public: bool
    length: int

    def as_dict(self) -> dict:
        return {
            "format": self.format,
            "hasHeaders": self.has_headers,
            "isPrivate": self.is_private,
            "isPublic": self.is_public,
            "length": self.length,
        }


def key_info(text: str) -> KeyInfo:
    """Describe the shape of ``text`` without altering it."""
    clean = text.strip()
    has_headers = "-----BEGIN" in clean and "-----END" in clean
    is_private = is_public = False
    fmt = "unknown"

    if "PRIVATE KEY" in clean:
        is_private = True
        fmt = "rsa-private" if "RSA PRIVATE KEY" in clean else "pkcs8-private"
    elif "PUBLIC KEY" in clean:
        is_public = True
        fmt = "rsa-public" if "RSA PUBLIC KEY" in clean else "pkcs8-public"
    elif is_valid_key_content(clean):
        fmt = "base64-content"

    return KeyInfo(
        format=fmt,
        has_headers=has_headers,
        is_private=is_private,
        is_public=is_public,
        length=len(text),
    )


def load_private_key(text: str) -> rsa.RSAPrivateKey:
    """
    Normalize and parse an RSA private key.

    Raises :class:`InvalidKeyError` for empty input and :class:`SigningError`
    when the PEM does not decode to an RSA private key.
    """
    pem = normalize_private_key(text)
    try:
        key = serialization.load_pem_private_key(pem.encode("ascii"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise SigningError(f"Private key cannot be loaded for RS256 signing: {exc}") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError(
            f"RS256 requires an RSA private key, got {type(key).__name__}"
        )
    return key


@dataclass(frozen=True)
class RsaKeyPair:
    private_key: str
    public_key: str
    key_size: int
    generated_at: datetime


def generate_rsa_key_pair(key_size: int = MIN_KEY_SIZE) -> RsaKeyPair:
    """Generate a PKCS#8 private key and its SubjectPublicKeyInfo public key."""
    if key_size < MIN_KEY_SIZE:
        raise InvalidKeyError(f"Key size must be at least {MIN_KEY_SIZE} bits")

    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return RsaKeyPair(
        private_key=private_pem.decode("ascii").strip(),
        public_key=public_pem.decode("ascii").strip(),
        key_size=key_size,
        generated_at=datetime.now(timezone.utc),
    )
