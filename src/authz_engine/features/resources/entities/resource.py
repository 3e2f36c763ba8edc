"""Resource domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ....config.constants import DEFAULT_CATEGORY
from ....core.value_objects import PermissionName


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Resource:
    """A named domain object category and the actions allowed on it."""

    id: str
    name: str
    description: str
    actions: List[str]
    category: str = DEFAULT_CATEGORY
    default_scope: Optional[str] = None
    is_system: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def permission_names(self) -> List[str]:
        """Names of the permissions generated for this resource's actions."""
        return [PermissionName(self.name, action, self.default_scope).value for action in self.actions]

    def matches(self, term: str) -> bool:
        term = term.lower()
        if any(term in (value or "").lower() for value in (self.name, self.description, self.category)):
            return True
        return any(term in action.lower() for action in self.actions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "actions": list(self.actions),
            "category": self.category,
            "default_scope": self.default_scope,
            "is_system": self.is_system,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class ResourcePatch:
    """Partial update of a resource; ``None`` leaves a field unchanged.

    ``clear_default_scope`` removes the default scope, since ``None`` cannot
    express that.
    """

    description: Optional[str] = None
    actions: Optional[List[str]] = None
    category: Optional[str] = None
    default_scope: Optional[str] = None
    clear_default_scope: bool = False
