"""Resource registry feature."""

from .entities import Resource, ResourcePatch, ResourceRepository
from .repositories import AsyncPGResourceRepository
from .services import ResourceRegistry

__all__ = [
    "AsyncPGResourceRepository",
    "Resource",
    "ResourcePatch",
    "ResourceRegistry",
    "ResourceRepository",
]
