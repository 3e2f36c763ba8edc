"""Protocol interfaces for resource persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .resource import Resource


@runtime_checkable
class ResourceRepository(Protocol):
    """Protocol for resource data access operations."""

    @abstractmethod
    async def create(self, resource: Resource) -> Resource:
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Resource]:
        ...

    @abstractmethod
    async def list_all(self) -> List[Resource]:
        ...

    @abstractmethod
    async def update(self, resource: Resource) -> Resource:
        ...

    @abstractmethod
    async def delete(self, resource_id: str) -> bool:
        ...
