from .role_store import RoleStore

__all__ = ["RoleStore"]
