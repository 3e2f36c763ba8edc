"""Role domain entity.

Roles live entirely in the identity provider; this entity is the decoded
view of a provider role and its attribute bag.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ....config.constants import is_system_role
from ...identity import RoleAttributeBag, RoleRecord


@dataclass
class Role:
    """A named bundle of permissions, optionally composite."""

    name: str
    description: str = ""
    permissions: List[str] = field(default_factory=list)
    composite: bool = False
    child_roles: List[str] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    id: Optional[str] = None

    @property
    def is_system(self) -> bool:
        return is_system_role(self.name)

    @classmethod
    def from_record(cls, record: RoleRecord) -> "Role":
        """Build a Role from a provider record.

        Native composite links are authoritative; the ``childRoles``
        attribute mirror is only used when the provider reports none.
        """
        bag = RoleAttributeBag.decode(record.attributes)
        child_roles = list(record.child_roles) or (bag.child_roles if record.composite else [])
        return cls(
            name=record.name,
            description=record.description or "",
            permissions=bag.permissions,
            composite=record.composite or bool(child_roles),
            child_roles=child_roles,
            attributes=bag.custom,
            id=record.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "permissions": list(self.permissions),
            "composite": self.composite,
            "child_roles": list(self.child_roles),
            "attributes": dict(self.attributes),
            "is_system": self.is_system,
        }


@dataclass
class RolePatch:
    """Partial update of a role; ``None`` leaves a field unchanged.

    ``permissions`` replaces the role's permission list; ``attributes`` is
    merged key by key into the custom attributes.
    """

    description: Optional[str] = None
    permissions: Optional[List[str]] = None
    composite: Optional[bool] = None
    child_roles: Optional[List[str]] = None
    attributes: Optional[Dict[str, str]] = None
