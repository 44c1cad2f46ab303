"""
Exception hierarchy shared by the token-signing core.
"""

from __future__ import annotations

__all__ = [
    "PaywareAuthError",
    "InvalidKeyError",
    "MissingAuthorizationError",
    "UnsupportedRoleError",
    "SigningError",
    "InvalidTokenError",
]


class PaywareAuthError(Exception):
    """Base class for every error raised by this package."""


class InvalidKeyError(PaywareAuthError):
    """Raised when key material is empty or cannot be normalized."""


class MissingAuthorizationError(PaywareAuthError):
    """Raised when an identity, target partner or delegation token is missing."""


class UnsupportedRoleError(PaywareAuthError):
    """Raised for a partner role that has no token-construction strategy."""


class SigningError(PaywareAuthError):
    """Raised when the RSA signature cannot be produced."""


class InvalidTokenError(PaywareAuthError):
    """Raised when a string handed to the validator is not a decodable JWT."""
