"""
Selection of the token-construction mode from a partner's declared role.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Any, Optional, Union

from .digest import DigestAlgorithm
from .errors import InvalidKeyError, UnsupportedRoleError
from .tokens import AuthMode, DelegatedAuth, DirectAuth, IssuedToken, issue_token

__all__ = [
    "PartnerRole",
    "PartnerType",
    "issue_for_role",
    "resolve_role",
    "select_mode",
]


class PartnerRole(str, enum.Enum):
    DIRECT = "direct"
    DELEGATED = "delegated"


class PartnerType(str, enum.Enum):
    """Kinds of payware partners and the role each one authenticates with."""

    MERCHANT = "merchant"
    ISV = "isv"
    PAYMENT_INSTITUTION = "payment_institution"

    @property
    def role(self) -> PartnerRole:
        if self is PartnerType.ISV:
            return PartnerRole.DELEGATED
        return PartnerRole.DIRECT

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    PartnerType.MERCHANT: "Merchant",
    PartnerType.ISV: "Independent Software Vendor",
    PartnerType.PAYMENT_INSTITUTION: "Payment Institution",
}

RoleLike = Union[PartnerRole, PartnerType, str]

_PARTNER_ID = re.compile(r"^[A-Z0-9]{8}$")


def resolve_role(value: RoleLike) -> PartnerRole:
    """Map a role or partner type (enum or string) onto a :class:`PartnerRole`."""
    if isinstance(value, PartnerRole):
        return value
    if isinstance(value, PartnerType):
        return value.role

    name = str(value).strip().lower()
    for role in PartnerRole:
        if role.value == name:
            return role
    for partner_type in PartnerType:
        if partner_type.value == name:
            return partner_type.role

    valid = [r.value for r in PartnerRole] + [t.value for t in PartnerType]
    raise UnsupportedRoleError(
        f"Unsupported partner role: {value}. Valid roles: {', '.join(valid)}"
    )


def select_mode(
    role: RoleLike,
    identity: str,
    *,
    target_identity: Optional[str] = None,
    delegation_token: Optional[str] = None,
) -> AuthMode:
    """
    Build the authentication mode for ``role``.

    Raises :class:`UnsupportedRoleError` for unknown roles and
    :class:`MissingAuthorizationError` when a required field is empty.
    """
    resolved = resolve_role(role)
    if resolved is PartnerRole.DELEGATED:
        mode = DelegatedAuth(
            identity=identity,
            target_identity=target_identity,
            delegation_token=delegation_token,
        )
        if not _PARTNER_ID.match(mode.target_identity):
            logging.warning(
                "Target partner ID %s is not 8 uppercase alphanumeric characters",
                mode.target_identity,
            )
        return mode
    return DirectAuth(identity=identity)


def issue_for_role(
    role: RoleLike,
    identity: str,
    key_material: str,
    body: Any = None,
    *,
    target_identity: Optional[str] = None,
    delegation_token: Optional[str] = None,
    algorithm: Union[str, DigestAlgorithm] = DigestAlgorithm.SHA256,
    now: Optional[int] = None,
) -> IssuedToken:
    """Validate the call-site arguments for ``role`` and issue a token."""
    mode = select_mode(
        role,
        identity,
        target_identity=target_identity,
        delegation_token=delegation_token,
    )
    if not key_material:
        raise InvalidKeyError("Private key is required to issue a token")

    logging.debug("Selected %s mode for partner %s", type(mode).__name__, identity)
    return issue_token(mode, key_material, body, algorithm=algorithm, now=now)
