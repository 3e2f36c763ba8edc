"""Typed codecs for the identity provider's free-form attribute bags.

Structured authorization data (role permissions, mirrored child roles,
user direct permissions and a write version) lives under reserved keys.
Everything else round-trips untouched.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ....config.constants import AttributeKeys
from .records import Attributes

logger = logging.getLogger(__name__)


def _dedupe(values: List[str]) -> List[str]:
    result: List[str] = []
    for value in values:
        if value not in result:
            result.append(value)
    return result


def _decode_version(raw: Optional[List[str]]) -> int:
    if not raw:
        return 0
    try:
        return int(raw[0])
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed {AttributeKeys.VERSION} attribute value: {raw!r}")
        return 0


@dataclass
class RoleAttributeBag:
    """Decoded view of a role's attribute bag.

    ``custom`` holds caller-defined single-valued attributes; on decode only
    the first value of each non-reserved key is kept.
    """

    permissions: List[str] = field(default_factory=list)
    child_roles: List[str] = field(default_factory=list)
    custom: Dict[str, str] = field(default_factory=dict)
    version: int = 0

    @classmethod
    def decode(cls, attributes: Optional[Attributes]) -> "RoleAttributeBag":
        attributes = attributes or {}
        custom = {
            key: values[0]
            for key, values in attributes.items()
            if key not in AttributeKeys.ROLE_RESERVED and values
        }
        return cls(
            permissions=_dedupe(list(attributes.get(AttributeKeys.ROLE_PERMISSIONS, []))),
            child_roles=_dedupe(list(attributes.get(AttributeKeys.ROLE_CHILD_ROLES, []))),
            custom=custom,
            version=_decode_version(attributes.get(AttributeKeys.VERSION)),
        )

    def encode(self) -> Attributes:
        attributes: Attributes = {key: [value] for key, value in self.custom.items()}
        attributes[AttributeKeys.ROLE_PERMISSIONS] = list(self.permissions)
        if self.child_roles:
            attributes[AttributeKeys.ROLE_CHILD_ROLES] = list(self.child_roles)
        attributes[AttributeKeys.VERSION] = [str(self.version)]
        return attributes


@dataclass
class UserAttributeBag:
    """Decoded view of a user's attribute bag."""

    direct_permissions: List[str] = field(default_factory=list)
    version: int = 0
    other: Attributes = field(default_factory=dict)

    @classmethod
    def decode(cls, attributes: Optional[Attributes]) -> "UserAttributeBag":
        attributes = attributes or {}
        return cls(
            direct_permissions=_dedupe(list(attributes.get(AttributeKeys.USER_DIRECT_PERMISSIONS, []))),
            version=_decode_version(attributes.get(AttributeKeys.VERSION)),
            other={
                key: list(values)
                for key, values in attributes.items()
                if key not in AttributeKeys.USER_RESERVED
            },
        )

    def encode(self) -> Attributes:
        attributes: Attributes = {key: list(values) for key, values in self.other.items()}
        attributes[AttributeKeys.USER_DIRECT_PERMISSIONS] = list(self.direct_permissions)
        attributes[AttributeKeys.VERSION] = [str(self.version)]
        return attributes
