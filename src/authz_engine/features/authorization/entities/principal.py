"""Authorization entities: the request principal and a user's resolved state."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set


@dataclass(frozen=True)
class Principal:
    """Authenticated caller supplied by the request pipeline."""

    user_id: str
    username: str = ""


@dataclass
class UserAuthorizationState:
    """A user's roles, direct grants and the effective permission set.

    ``effective_permissions`` is a set; callers must not rely on ordering.
    """

    user_id: str
    roles: List[str] = field(default_factory=list)
    direct_permissions: List[str] = field(default_factory=list)
    effective_permissions: Set[str] = field(default_factory=set)

    def has_permission(self, permission: str) -> bool:
        return permission in self.effective_permissions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "roles": list(self.roles),
            "direct_permissions": list(self.direct_permissions),
            "effective_permissions": sorted(self.effective_permissions),
        }
