"""Permission catalog feature."""

from .entities import Permission, PermissionPatch, PermissionRepository, describe_permission
from .repositories import AsyncPGPermissionRepository
from .services import PermissionCatalog

__all__ = [
    "AsyncPGPermissionRepository",
    "Permission",
    "PermissionCatalog",
    "PermissionPatch",
    "PermissionRepository",
    "describe_permission",
]
