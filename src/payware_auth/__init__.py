"""
Public facade for the payware request-signing package.

The module re-exports the most useful pieces for integrators so they can
``from payware_auth import ...`` without navigating the package.
"""

from .api import create_client, create_token
from .core import (
    PAYWARE_AUDIENCE,
    ConfigError,
    ConfigParameters,
    DelegatedAuth,
    DigestAlgorithm,
    DirectAuth,
    InvalidKeyError,
    InvalidTokenError,
    IssuedToken,
    KeyInfo,
    MissingAuthorizationError,
    PartnerRole,
    PartnerType,
    PaywareAuthError,
    PaywareClient,
    PaywareConfig,
    SignedRequest,
    SigningError,
    TokenReport,
    UnsupportedRoleError,
    auth_headers,
    canonicalize,
    content_digest,
    generate_rsa_key_pair,
    issue_for_role,
    issue_token,
    key_info,
    load_config,
    normalize_key,
    normalize_private_key,
    normalize_public_key,
    select_mode,
    serialize_payload,
    validate_token,
    verify_token,
)

__version__ = "0.1.0"

__all__ = (
    "PAYWARE_AUDIENCE",
    "ConfigError",
    "ConfigParameters",
    "DelegatedAuth",
    "DigestAlgorithm",
    "DirectAuth",
    "InvalidKeyError",
    "InvalidTokenError",
    "IssuedToken",
    "KeyInfo",
    "MissingAuthorizationError",
    "PartnerRole",
    "PartnerType",
    "PaywareAuthError",
    "PaywareClient",
    "PaywareConfig",
    "SignedRequest",
    "SigningError",
    "TokenReport",
    "UnsupportedRoleError",
    "auth_headers",
    "canonicalize",
    "content_digest",
    "create_client",
    "create_token",
    "generate_rsa_key_pair",
    "issue_for_role",
    "issue_token",
    "key_info",
    "load_config",
    "normalize_key",
    "normalize_private_key",
    "normalize_public_key",
    "select_mode",
    "serialize_payload",
    "validate_token",
    "verify_token",
)
