"""
Diagnostics for issued tokens.

These helpers decode a token, check its claims against what payware expects
and recompute the content digest from a reference body. They explain why a
request was rejected; they are not part of the signing path.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import jwt

from .canonical import serialize_payload
from .digest import DigestAlgorithm, content_digest
from .errors import InvalidTokenError
from .keys import normalize_public_key
from .tokens import PAYWARE_AUDIENCE, SIGNING_ALGORITHM, TOKEN_TYPE

__all__ = [
    "HashCheck",
    "TokenReport",
    "decode_token",
    "validate_token",
    "verify_token",
]

# Body-less requests legitimately carry no digest.
_INFORMATIONAL = frozenset({"contentHash"})


@dataclass(frozen=True)
class HashCheck:
    algorithm: DigestAlgorithm
    provided: str
    calculated: Optional[str]
    canonical_body: Optional[str]

    @property
    def matches(self) -> bool:
        return self.provided == self.calculated


@dataclass(frozen=True)
class TokenReport:
    header: Dict[str, Any]
    payload: Dict[str, Any]
    checks: Dict[str, bool]
    hash_check: Optional[HashCheck] = None
    issues: List[str] = field(default_factory=list)

    @property
    def digest_algorithm(self) -> Optional[DigestAlgorithm]:
        if self.header.get("contentSha256"):
            return DigestAlgorithm.SHA256
        if self.header.get("contentMd5"):
            return DigestAlgorithm.MD5
        return None

    @property
    def valid(self) -> bool:
        if self.hash_check is not None and not self.hash_check.matches:
            return False
        return all(
            passed for name, passed in self.checks.items() if name not in _INFORMATIONAL
        )

    def as_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "valid": self.valid,
            "header": self.header,
            "payload": self.payload,
            "checks": dict(self.checks),
            "issues": list(self.issues),
        }
        if self.hash_check is not None:
            result["hashCheck"] = {
                "type": self.hash_check.algorithm.label,
                "provided": self.hash_check.provided,
                "calculated": self.hash_check.calculated,
                "matches": self.hash_check.matches,
                "canonicalBody": self.hash_check.canonical_body,
            }
        return result


def decode_token(token: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return ``(header, payload)`` without checking the signature."""
    if not token or not isinstance(token, str):
        raise InvalidTokenError("JWT token is required")
    try:
        header = jwt.get_unverified_header(token)
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(f"Invalid JWT token format: {exc}") from exc
    return header, payload


def _audience_ok(payload: Mapping[str, Any]) -> bool:
    if "sub" in payload:
        return bool(payload.get("aud"))
    return payload.get("aud") == PAYWARE_AUDIENCE


def validate_token(token: str, expected_body: Any = None) -> TokenReport:
    """
    Check ``token`` against the payware token rules.

    If ``expected_body`` is given and the header carries a content digest,
    the digest is recomputed over the canonical form of ``expected_body``.
    """
    header, payload = decode_token(token)

    has_sha256 = bool(header.get("contentSha256"))
    has_md5 = bool(header.get("contentMd5"))
    checks = {
        "structure": True,
        "algorithm": header.get("alg") == SIGNING_ALGORITHM,
        "type": header.get("typ") == TOKEN_TYPE,
        "audience": _audience_ok(payload),
        "issuer": bool(payload.get("iss")),
        "issuedAt": bool(payload.get("iat")),
        "contentHash": has_sha256 or has_md5,
    }

    hash_check = None
    canonical = serialize_payload(expected_body)
    if canonical is not None and (has_sha256 or has_md5):
        algorithm = DigestAlgorithm.SHA256 if has_sha256 else DigestAlgorithm.MD5
        hash_check = HashCheck(
            algorithm=algorithm,
            provided=header[algorithm.header_field],
            calculated=_recompute(canonical, algorithm),
            canonical_body=canonical,
        )

    issues: List[str] = []
    if not checks["algorithm"]:
        issues.append(f"Algorithm should be '{SIGNING_ALGORITHM}'")
    if not checks["type"]:
        issues.append(f"Type should be '{TOKEN_TYPE}'")
    if not checks["audience"]:
        if "sub" in payload:
            issues.append("Delegated token is missing the target partner audience (aud)")
        else:
            issues.append(f"Audience should be '{PAYWARE_AUDIENCE}'")
    if not checks["issuer"]:
        issues.append("Missing issuer (iss) claim")
    if not checks["issuedAt"]:
        issues.append("Missing issued at (iat) claim")
    if has_md5 and not has_sha256:
        issues.append(
            "Using deprecated MD5 hash - consider upgrading to SHA-256 (contentSha256)"
        )
    if hash_check is not None and not hash_check.matches:
        issues.append(
            "Content hash mismatch - ensure deterministic JSON serialization with sorted keys"
        )

    return TokenReport(
        header=header,
        payload=payload,
        checks=checks,
        hash_check=hash_check,
        issues=issues,
    )


def _recompute(canonical: str, algorithm: DigestAlgorithm) -> Optional[str]:
    if algorithm.deprecated:
        # already reported as an issue
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DeprecationWarning)
            return content_digest(canonical, algorithm)
    return content_digest(canonical, algorithm)


def verify_token(
    token: str,
    public_key: str,
    *,
    audience: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Verify the RS256 signature of ``token`` and return its claims.

    PyJWT errors propagate unchanged. The audience is only checked when
    ``audience`` is given.
    """
    options = {"verify_aud": audience is not None}
    return jwt.decode(
        token,
        normalize_public_key(public_key),
        algorithms=[SIGNING_ALGORITHM],
        audience=audience,
        options=options,
    )
