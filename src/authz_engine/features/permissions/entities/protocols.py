"""Protocol interfaces for permission persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .permission import Permission


@runtime_checkable
class PermissionRepository(Protocol):
    """Protocol for permission data access operations."""

    @abstractmethod
    async def create(self, permission: Permission) -> Permission:
        """Persist a new permission."""
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Permission]:
        """Get permission by canonical name."""
        ...

    @abstractmethod
    async def list_all(self) -> List[Permission]:
        """List all persisted permissions."""
        ...

    @abstractmethod
    async def update(self, permission: Permission) -> Permission:
        """Persist changes to description, scope and category."""
        ...

    @abstractmethod
    async def delete(self, permission_id: str) -> bool:
        """Delete a permission by id."""
        ...
