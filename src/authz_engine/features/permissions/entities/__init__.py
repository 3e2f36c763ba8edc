"""Permission entities package."""

from .descriptions import describe_permission
from .permission import Permission, PermissionPatch
from .protocols import PermissionRepository

__all__ = [
    "Permission",
    "PermissionPatch",
    "PermissionRepository",
    "describe_permission",
]
