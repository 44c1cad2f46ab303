"""
Configuration objects and helpers for payware partners.

Configuration belongs to the request-issuing side: it resolves who the
partner is and where its private key lives, then hands explicit values to
the signing core.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .digest import DigestAlgorithm, resolve_algorithm
from .environment import build_environment
from .errors import PaywareAuthError
from .strategy import PartnerRole, PartnerType

__all__ = [
    "ConfigError",
    "ConfigParameters",
    "PaywareConfig",
    "load_config",
]

DEFAULT_SANDBOX_URL = "https://sandbox.payware.eu/api"
DEFAULT_PRODUCTION_URL = "https://api.payware.eu/api"

_PARAMETER_TO_ENV_KEY = {
    "partner_id": "PAYWARE_PARTNER_ID",
    "partner_type": "PAYWARE_PARTNER_TYPE",
    "sandbox": "PAYWARE_USE_SANDBOX",
    "sandbox_private_key_path": "PAYWARE_SANDBOX_PRIVATE_KEY_PATH",
    "production_private_key_path": "PAYWARE_PRODUCTION_PRIVATE_KEY_PATH",
    "sandbox_url": "PAYWARE_SANDBOX_URL",
    "production_url": "PAYWARE_PRODUCTION_URL",
    "api_version": "PAYWARE_API_VERSION",
    "content_digest": "PAYWARE_CONTENT_DIGEST",
    "default_merchant_id": "PAYWARE_DEFAULT_MERCHANT_ID",
    "timeout_seconds": "PAYWARE_TIMEOUT_SECONDS",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (PartnerType, DigestAlgorithm)):
        return value.value
    return str(value)


class ConfigError(PaywareAuthError):
    """Raised when the supplied configuration is invalid."""


@dataclass(frozen=True)
class ConfigParameters:
    """
    Explicit parameter bundle for constructing :class:`PaywareConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_config`.
    """

    partner_id: Optional[str] = None
    partner_type: Optional[PartnerType | str] = None
    sandbox: Optional[bool | str] = None
    sandbox_private_key_path: Optional[str] = None
    production_private_key_path: Optional[str] = None
    sandbox_url: Optional[str] = None
    production_url: Optional[str] = None
    api_version: Optional[str] = None
    content_digest: Optional[DigestAlgorithm | str] = None
    default_merchant_id: Optional[str] = None
    timeout_seconds: Optional[int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _parse_bool(raw: str, field_name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{field_name} must be a boolean, got '{raw}'")


def _parse_partner_type(raw: str) -> PartnerType:
    try:
        return PartnerType(raw.strip().lower())
    except ValueError as exc:
        valid = ", ".join(t.value for t in PartnerType)
        raise ConfigError(f"Invalid partner type: {raw}. Valid types: {valid}") from exc


@dataclass(frozen=True)
class PaywareConfig:
    partner_id: str
    partner_type: PartnerType
    base_url: str
    private_key_path: Optional[str] = None
    sandbox: bool = True
    api_version: str = "1"
    digest_algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
    default_merchant_id: Optional[str] = None
    timeout_seconds: int = 30

    @property
    def role(self) -> PartnerRole:
        return self.partner_type.role

    @property
    def oauth2_base_url(self) -> str:
        """OAuth2 endpoints live beside the versioned API, not under ``/api``."""
        base = self.base_url.rstrip("/")
        if base.endswith("/api"):
            base = base[: -len("/api")]
        return base

    def read_private_key(self) -> str:
        if not self.private_key_path:
            env_key = (
                "PAYWARE_SANDBOX_PRIVATE_KEY_PATH"
                if self.sandbox
                else "PAYWARE_PRODUCTION_PRIVATE_KEY_PATH"
            )
            raise ConfigError(f"{env_key} environment variable is required")
        path = Path(self.private_key_path).expanduser()
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                f"Cannot read private key from {self.private_key_path}: {exc}"
            ) from exc

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "PaywareConfig":
        partner_id = (values.get("PAYWARE_PARTNER_ID") or "").strip()
        if not partner_id:
            raise ConfigError("PAYWARE_PARTNER_ID environment variable is required")

        partner_type = _parse_partner_type(values.get("PAYWARE_PARTNER_TYPE", "merchant"))
        sandbox = _parse_bool(values.get("PAYWARE_USE_SANDBOX", "true"), "PAYWARE_USE_SANDBOX")

        if sandbox:
            base_url = values.get("PAYWARE_SANDBOX_URL", DEFAULT_SANDBOX_URL)
            private_key_path = values.get("PAYWARE_SANDBOX_PRIVATE_KEY_PATH")
        else:
            base_url = values.get("PAYWARE_PRODUCTION_URL", DEFAULT_PRODUCTION_URL)
            private_key_path = values.get("PAYWARE_PRODUCTION_PRIVATE_KEY_PATH")

        try:
            digest_algorithm = resolve_algorithm(values.get("PAYWARE_CONTENT_DIGEST", "sha256"))
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        timeout_raw = values.get("PAYWARE_TIMEOUT_SECONDS", "30")
        try:
            timeout_seconds = int(timeout_raw)
        except ValueError as exc:
            raise ConfigError(
                f"PAYWARE_TIMEOUT_SECONDS must be an integer, got '{timeout_raw}'"
            ) from exc
        if timeout_seconds <= 0:
            raise ConfigError("PAYWARE_TIMEOUT_SECONDS must be greater than zero")

        return cls(
            partner_id=partner_id,
            partner_type=partner_type,
            base_url=base_url.rstrip("/"),
            private_key_path=private_key_path or None,
            sandbox=sandbox,
            api_version=values.get("PAYWARE_API_VERSION", "1"),
            digest_algorithm=digest_algorithm,
            default_merchant_id=values.get("PAYWARE_DEFAULT_MERCHANT_ID") or None,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ConfigParameters] = None,
    ) -> "PaywareConfig":
        merged_overrides = dict(overrides or {})
        if parameters is not None:
            merged_overrides.update(parameters.as_overrides())

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ConfigParameters] = None,
    **explicit: Any,
) -> PaywareConfig:
    """
    Convenience wrapper around :meth:`PaywareConfig.from_env`.

    Keyword arguments named like the fields of :class:`ConfigParameters`
    override both the environment and ``parameters``.
    """
    unknown = set(explicit) - set(_PARAMETER_TO_ENV_KEY)
    if unknown:
        raise TypeError(f"Unknown configuration parameter(s): {', '.join(sorted(unknown))}")

    merged = dict(vars(parameters)) if parameters is not None else {}
    merged.update({key: value for key, value in explicit.items() if value is not None})
    return PaywareConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=ConfigParameters(**merged),
    )
