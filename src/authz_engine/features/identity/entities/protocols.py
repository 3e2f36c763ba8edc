"""Protocol for the external identity provider.

The provider owns users, roles, role membership and both attribute bags.
Single-entity reads return None for unknown names/ids; every other
failure is raised as IdentityProviderError.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .records import Attributes, RoleRecord, UserRecord


@runtime_checkable
class IdentityProvider(Protocol):
    """Role and user operations consumed by the authorization engine."""

    @abstractmethod
    async def get_role_by_name(self, name: str) -> Optional[RoleRecord]:
        """Get a role with its attributes and native child roles."""
        ...

    @abstractmethod
    async def list_roles(self) -> List[RoleRecord]:
        """List every role in the realm with attributes and child roles."""
        ...

    @abstractmethod
    async def create_role(
        self,
        name: str,
        description: str,
        attributes: Attributes,
        composite: bool = False,
    ) -> RoleRecord:
        """Create a role."""
        ...

    @abstractmethod
    async def update_role(
        self,
        name: str,
        attributes: Attributes,
        description: Optional[str] = None,
        composite: Optional[bool] = None,
    ) -> None:
        """Replace a role's attribute bag, optionally its description and composite flag."""
        ...

    @abstractmethod
    async def delete_role(self, name: str) -> None:
        """Delete a role."""
        ...

    @abstractmethod
    async def add_composite_roles(self, name: str, child_names: List[str]) -> None:
        """Link child roles into a composite role."""
        ...

    @abstractmethod
    async def remove_composite_roles(self, name: str, child_names: List[str]) -> None:
        """Unlink child roles from a composite role."""
        ...

    @abstractmethod
    async def get_users_with_role(self, name: str) -> List[UserRecord]:
        """List users directly holding a role."""
        ...

    @abstractmethod
    async def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Get a user with its attribute bag."""
        ...

    @abstractmethod
    async def update_user(self, user_id: str, attributes: Attributes) -> None:
        """Replace a user's attribute bag."""
        ...

    @abstractmethod
    async def get_user_roles(self, user_id: str) -> List[str]:
        """Get the names of the roles directly mapped to a user."""
        ...

    @abstractmethod
    async def assign_roles_to_user(self, user_id: str, role_names: List[str]) -> None:
        """Map roles to a user."""
        ...

    @abstractmethod
    async def remove_roles_from_user(self, user_id: str, role_names: List[str]) -> None:
        """Unmap roles from a user."""
        ...
