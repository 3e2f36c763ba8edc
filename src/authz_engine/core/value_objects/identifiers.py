"""Value objects and name validation for catalog identifiers.

Resource, action, scope and permission names share one lowercase
grammar; the helpers here raise InvalidFormatError so callers surface a
client error rather than a bare ValueError.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import uuid4

from ...config.constants import IdPrefixes, NamePatterns
from ..exceptions import InvalidFormatError

_RESOURCE_RE = re.compile(NamePatterns.RESOURCE)
_ACTION_RE = re.compile(NamePatterns.ACTION)
_PERMISSION_RE = re.compile(NamePatterns.PERMISSION)
_ROLE_RE = re.compile(NamePatterns.ROLE)


def is_valid_permission_name(name: str) -> bool:
    return isinstance(name, str) and bool(_PERMISSION_RE.fullmatch(name))


def validate_resource_name(name: str) -> str:
    if not isinstance(name, str) or not _RESOURCE_RE.fullmatch(name):
        raise InvalidFormatError(
            f"Invalid resource name '{name}': only lowercase letters and underscores are allowed",
            details={"field": "name", "value": name},
        )
    return name


def validate_action_name(action: str) -> str:
    if not isinstance(action, str) or not _ACTION_RE.fullmatch(action):
        raise InvalidFormatError(
            f"Invalid action '{action}': only lowercase letters and underscores are allowed",
            details={"field": "action", "value": action},
        )
    return action


def validate_scope(scope: Optional[str]) -> Optional[str]:
    if scope is None:
        return None
    if not isinstance(scope, str) or not _ACTION_RE.fullmatch(scope):
        raise InvalidFormatError(
            f"Invalid scope '{scope}': only lowercase letters and underscores are allowed",
            details={"field": "scope", "value": scope},
        )
    return scope


def validate_actions(actions: Iterable[str]) -> List[str]:
    """Validate an action list: non-empty, well-formed, no duplicates.

    Returns the actions in their original order.
    """
    actions = list(actions or [])
    if not actions:
        raise InvalidFormatError("A resource must define at least one action", details={"field": "actions"})

    seen = set()
    for action in actions:
        validate_action_name(action)
        if action in seen:
            raise InvalidFormatError(
                f"Duplicate action '{action}'",
                details={"field": "actions", "value": action},
            )
        seen.add(action)
    return actions


def validate_role_name(name: str) -> str:
    if not isinstance(name, str) or not _ROLE_RE.fullmatch(name):
        raise InvalidFormatError(
            f"Invalid role name '{name}'",
            details={"field": "name", "value": name},
        )
    return name


@dataclass(frozen=True)
class PermissionName:
    """Canonical permission name ``resource:action[:scope]``."""

    resource: str
    action: str
    scope: Optional[str] = None

    def __post_init__(self):
        validate_resource_name(self.resource)
        validate_action_name(self.action)
        validate_scope(self.scope)

    @classmethod
    def parse(cls, value: str) -> "PermissionName":
        if not is_valid_permission_name(value):
            raise InvalidFormatError(
                f"Invalid permission name '{value}': expected resource:action or resource:action:scope",
                details={"field": "name", "value": value},
            )
        parts = value.split(":")
        return cls(parts[0], parts[1], parts[2] if len(parts) == 3 else None)

    @property
    def value(self) -> str:
        if self.scope:
            return f"{self.resource}:{self.action}:{self.scope}"
        return f"{self.resource}:{self.action}"

    def __str__(self) -> str:
        return self.value


def validate_permission_names(names: Iterable[str]) -> List[str]:
    """Check every name against the canonical pattern and de-duplicate, keeping order."""
    result: List[str] = []
    for name in names or []:
        PermissionName.parse(name)
        if name not in result:
            result.append(name)
    return result


def generate_resource_id() -> str:
    return f"{IdPrefixes.RESOURCE}{uuid4().hex}"


def generate_permission_id() -> str:
    return f"{IdPrefixes.PERMISSION}{uuid4().hex}"
