from .permission_repository import AsyncPGPermissionRepository

__all__ = ["AsyncPGPermissionRepository"]
