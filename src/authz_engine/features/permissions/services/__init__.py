from .permission_catalog import PermissionCatalog

__all__ = ["PermissionCatalog"]
