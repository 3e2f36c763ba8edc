from .protocols import ResourceRepository
from .resource import Resource, ResourcePatch

__all__ = ["Resource", "ResourcePatch", "ResourceRepository"]
