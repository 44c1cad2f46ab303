"""
RS256 token construction for the two partner authentication modes.

A direct partner signs for itself and addresses the payware platform. A
delegating partner (an ISV) signs for a target partner and proves its
authority with a delegation token in the ``sub`` claim.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

import jwt

from .canonical import serialize_payload
from .digest import DigestAlgorithm, content_digest, resolve_algorithm
from .errors import MissingAuthorizationError, SigningError
from .keys import load_private_key

__all__ = [
    "PAYWARE_AUDIENCE",
    "SIGNING_ALGORITHM",
    "TOKEN_TYPE",
    "AuthMode",
    "DelegatedAuth",
    "DirectAuth",
    "IssuedToken",
    "issue_token",
]

PAYWARE_AUDIENCE = "https://payware.eu"
SIGNING_ALGORITHM = "RS256"
TOKEN_TYPE = "JWT"


def _require(value: Optional[str], message: str) -> None:
    if not value:
        raise MissingAuthorizationError(message)


@dataclass(frozen=True)
class DirectAuth:
    """The issuer authenticates as itself."""

    identity: str

    def __post_init__(self) -> None:
        _require(self.identity, "Partner ID is required to issue a token")

    def claims(self, issued_at: int) -> Dict[str, Any]:
        return {"iss": self.identity, "aud": PAYWARE_AUDIENCE, "iat": issued_at}


@dataclass(frozen=True)
class DelegatedAuth:
    """The issuer acts for ``target_identity`` using ``delegation_token``."""

    identity: str
    target_identity: str
    delegation_token: str = field(repr=False)

    def __post_init__(self) -> None:
        _require(self.identity, "Partner ID is required to issue a token")
        _require(
            self.target_identity,
            "Target partner ID is required for delegated authentication",
        )
        _require(
            self.delegation_token,
            "Delegation token is required for delegated authentication",
        )

    def claims(self, issued_at: int) -> Dict[str, Any]:
        return {
            "iss": self.identity,
            "aud": self.target_identity,
            "sub": self.delegation_token,
            "iat": issued_at,
        }


AuthMode = Union[DirectAuth, DelegatedAuth]


@dataclass(frozen=True)
class IssuedToken:
    """
    A signed token together with the body string it was digested over.

    ``body`` is ``None`` for body-less requests; otherwise it must be sent
    verbatim as the HTTP request body.
    """

    token: str
    header: Dict[str, Any]
    payload: Dict[str, Any]
    body: Optional[str] = None

    @property
    def content_digest(self) -> Optional[str]:
        return self.header.get("contentSha256") or self.header.get("contentMd5")

    @property
    def issued_at(self) -> datetime:
        return datetime.fromtimestamp(self.payload["iat"], tz=timezone.utc)

    @property
    def authorization(self) -> str:
        return f"Bearer {self.token}"

    @property
    def delegated(self) -> bool:
        return "sub" in self.payload


def issue_token(
    mode: AuthMode,
    key_material: str,
    body: Any = None,
    *,
    algorithm: Union[str, DigestAlgorithm] = DigestAlgorithm.SHA256,
    now: Optional[int] = None,
) -> IssuedToken:
    """
    Sign a fresh token for ``mode``.

    When ``body`` is given its canonical serialization is digested into the
    header and returned as :attr:`IssuedToken.body`.
    """
    algorithm = resolve_algorithm(algorithm)
    issued_at = int(time.time()) if now is None else int(now)
    payload = mode.claims(issued_at)

    header: Dict[str, Any] = {"alg": SIGNING_ALGORITHM, "typ": TOKEN_TYPE}
    serialized = serialize_payload(body)
    if serialized is not None:
        header[algorithm.header_field] = content_digest(serialized, algorithm)

    private_key = load_private_key(key_material)
    try:
        token = jwt.encode(
            payload,
            private_key,
            algorithm=SIGNING_ALGORITHM,
            headers=header,
        )
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        raise SigningError(f"Unable to sign {SIGNING_ALGORITHM} token: {exc}") from exc

    logging.debug(
        "Issued %s token for %s (digest: %s)",
        type(mode).__name__,
        mode.identity,
        algorithm.value if serialized is not None else "none",
    )
    return IssuedToken(token=token, header=header, payload=payload, body=serialized)
