"""
Core primitives for signing payware API requests.
"""

from .canonical import canonicalize, is_consistent, serialize_payload
from .client import PaywareClient, SignedRequest, auth_headers
from .config import ConfigError, ConfigParameters, PaywareConfig, load_config
from .digest import (
    DigestAlgorithm,
    content_digest,
    content_md5,
    content_sha256,
    resolve_algorithm,
)
from .environment import PaywareEnvironment, build_environment, load_env_file
from .errors import (
    InvalidKeyError,
    InvalidTokenError,
    MissingAuthorizationError,
    PaywareAuthError,
    SigningError,
    UnsupportedRoleError,
)
from .keys import (
    KeyInfo,
    RsaKeyPair,
    generate_rsa_key_pair,
    key_info,
    load_private_key,
    normalize_key,
    normalize_private_key,
    normalize_public_key,
)
from .strategy import PartnerRole, PartnerType, issue_for_role, resolve_role, select_mode
from .tokens import (
    PAYWARE_AUDIENCE,
    AuthMode,
    DelegatedAuth,
    DirectAuth,
    IssuedToken,
    issue_token,
)
from .validation import HashCheck, TokenReport, decode_token, validate_token, verify_token

__all__ = [
    "PAYWARE_AUDIENCE",
    "AuthMode",
    "ConfigError",
    "ConfigParameters",
    "DelegatedAuth",
    "DigestAlgorithm",
    "DirectAuth",
    "HashCheck",
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
    "PaywareEnvironment",
    "RsaKeyPair",
    "SignedRequest",
    "SigningError",
    "TokenReport",
    "UnsupportedRoleError",
    "auth_headers",
    "build_environment",
    "canonicalize",
    "content_digest",
    "content_md5",
    "content_sha256",
    "decode_token",
    "generate_rsa_key_pair",
    "is_consistent",
    "issue_for_role",
    "issue_token",
    "key_info",
    "load_config",
    "load_env_file",
    "load_private_key",
    "normalize_key",
    "normalize_private_key",
    "normalize_public_key",
    "resolve_algorithm",
    "resolve_role",
    "select_mode",
    "serialize_payload",
    "validate_token",
    "verify_token",
]
