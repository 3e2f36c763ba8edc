"""Typed records exchanged with the identity provider."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

# Provider attribute bags map a key to a list of string values
Attributes = Dict[str, List[str]]


@dataclass
class RoleRecord:
    """A role as stored by the identity provider."""

    name: str
    id: Optional[str] = None
    description: str = ""
    composite: bool = False
    attributes: Attributes = field(default_factory=dict)
    child_roles: List[str] = field(default_factory=list)


@dataclass
class UserRecord:
    """A user as stored by the identity provider."""

    id: str
    username: str = ""
    enabled: bool = True
    attributes: Attributes = field(default_factory=dict)
