"""
Public, high-level helpers for signing payware API requests.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import requests

from .core.client import PaywareClient
from .core.config import ConfigParameters, PaywareConfig, load_config
from .core.tokens import IssuedToken

__all__ = [
    "create_client",
    "create_token",
]


def _resolve_config(
    config: Optional[PaywareConfig],
    *,
    env_file: Optional[str],
    overrides: Optional[Mapping[str, str]],
    base: Optional[Mapping[str, str]],
    parameters: Optional[ConfigParameters],
    explicit: Mapping[str, Any],
) -> PaywareConfig:
    if config is None:
        return load_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            **explicit,
        )

    extras = (overrides, base, parameters, *explicit.values())
    if any(item is not None and item != {} for item in extras):
        raise ValueError(
            "Provide either a pre-built PaywareConfig or individual parameters, not both."
        )
    return config


def create_client(
    *,
    config: Optional[PaywareConfig] = None,
    session: Optional[requests.Session] = None,
    private_key: Optional[str] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ConfigParameters] = None,
    **explicit: Any,
) -> PaywareClient:
    """
    Construct a :class:`PaywareClient`.

    Callers can either supply a ready-made :class:`PaywareConfig` or let the
    helper assemble one from environment data. ``private_key`` skips reading
    the key file named by the configuration.
    """
    cfg = _resolve_config(
        config,
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        explicit=explicit,
    )
    return PaywareClient(cfg, session=session, private_key=private_key)


def create_token(
    body: Any = None,
    *,
    target_identity: Optional[str] = None,
    delegation_token: Optional[str] = None,
    oauth2: bool = False,
    config: Optional[PaywareConfig] = None,
    private_key: Optional[str] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ConfigParameters] = None,
    **explicit: Any,
) -> IssuedToken:
    """
    Issue a token for the configured partner.

    The returned :attr:`IssuedToken.body` is the string to send as the HTTP
    body.
    """
    client = create_client(
        config=config,
        private_key=private_key,
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        **explicit,
    )
    return client.issue(
        body,
        target_identity=target_identity,
        delegation_token=delegation_token,
        oauth2=oauth2,
    )
