"""Permission domain entity.

A permission is the canonical triple ``resource:action[:scope]``; its
name is immutable once created.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ....core.value_objects import PermissionName


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Permission:
    """Domain entity representing one grantable capability."""

    id: str
    name: str
    description: str
    resource: str
    action: str
    scope: Optional[str] = None
    category: str = "custom"
    is_system: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def permission_name(self) -> PermissionName:
        return PermissionName(self.resource, self.action, self.scope)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match used by catalog search."""
        term = term.lower()
        fields = (self.name, self.description, self.resource, self.action, self.category)
        return any(term in (value or "").lower() for value in fields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "resource": self.resource,
            "action": self.action,
            "scope": self.scope,
            "category": self.category,
            "is_system": self.is_system,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"Permission({self.name})"


@dataclass
class PermissionPatch:
    """Partial update of a permission; ``None`` leaves a field unchanged."""

    description: Optional[str] = None
    scope: Optional[str] = None
    category: Optional[str] = None

    def is_empty(self) -> bool:
        return self.description is None and self.scope is None and self.category is None
