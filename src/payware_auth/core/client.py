"""
HTTP helpers that send request bodies exactly as they were signed.

The adapter issues a fresh token per request and posts the canonical body
string from :class:`~payware_auth.core.tokens.IssuedToken` as raw bytes, so
no HTTP layer gets a chance to re-serialize it.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from .config import PaywareConfig
from .strategy import PartnerRole, issue_for_role
from .tokens import IssuedToken

__all__ = [
    "PaywareClient",
    "SignedRequest",
    "auth_headers",
]

_BODYLESS_METHODS = {"GET", "DELETE", "HEAD"}


def auth_headers(token: str, *, api_version: Optional[str] = "1") -> Dict[str, str]:
    """Headers required by payware; OAuth2 endpoints pass ``api_version=None``."""
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }
    if api_version is not None:
        headers["Api-Version"] = api_version
    return headers


@dataclass(frozen=True)
class SignedRequest:
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[str]
    token: IssuedToken = field(repr=False)

    @property
    def data(self) -> Optional[bytes]:
        return None if self.body is None else self.body.encode("utf-8")


def _decode_response(response: requests.Response, url: str) -> Dict[str, Any]:
    if response.status_code >= 400:
        raise RuntimeError(
            f"payware responded with {response.status_code}: {response.text}"
        )
    if not response.content:
        return {}
    try:
        return response.json()
    except json.JSONDecodeError as exc:
        raise RuntimeError(
            f"Failed to parse JSON from payware at {url}: {response.text}"
        ) from exc


class PaywareClient:
    """
    Thin wrapper that signs and sends requests for one configured partner.
    """

    def __init__(
        self,
        config: PaywareConfig,
        *,
        session: Optional[requests.Session] = None,
        private_key: Optional[str] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self._private_key = private_key

    @property
    def private_key(self) -> str:
        if self._private_key is None:
            self._private_key = self.config.read_private_key()
        return self._private_key

    def issue(
        self,
        body: Any = None,
        *,
        target_identity: Optional[str] = None,
        delegation_token: Optional[str] = None,
        oauth2: bool = False,
    ) -> IssuedToken:
        """
        Issue a token for the configured partner.

        OAuth2 calls are always direct-mode, even for delegating partners,
        because they address payware itself.
        """
        role = PartnerRole.DIRECT if oauth2 else self.config.role
        if role is PartnerRole.DELEGATED and not target_identity:
            target_identity = self.config.default_merchant_id
        return issue_for_role(
            role,
            self.config.partner_id,
            self.private_key,
            body,
            target_identity=target_identity,
            delegation_token=delegation_token,
            algorithm=self.config.digest_algorithm,
        )

    def prepare(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        target_identity: Optional[str] = None,
        delegation_token: Optional[str] = None,
        oauth2: bool = False,
    ) -> SignedRequest:
        method = method.upper()
        if method in _BODYLESS_METHODS:
            body = None

        issued = self.issue(
            body,
            target_identity=target_identity,
            delegation_token=delegation_token,
            oauth2=oauth2,
        )
        base_url = self.config.oauth2_base_url if oauth2 else self.config.base_url
        headers = auth_headers(
            issued.token,
            api_version=None if oauth2 else self.config.api_version,
        )
        return SignedRequest(
            method=method,
            url=f"{base_url}/{path.lstrip('/')}",
            headers=headers,
            body=issued.body,
            token=issued,
        )

    def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        target_identity: Optional[str] = None,
        delegation_token: Optional[str] = None,
        oauth2: bool = False,
    ) -> Dict[str, Any]:
        request = self.prepare(
            method,
            path,
            body,
            target_identity=target_identity,
            delegation_token=delegation_token,
            oauth2=oauth2,
        )
        logging.info("Sending %s %s", request.method, request.url)
        response = self.session.request(
            request.method,
            request.url,
            params=params,
            data=request.data,
            headers=request.headers,
            timeout=self.config.timeout_seconds,
        )
        return _decode_response(response, request.url)
