from .role import Role, RolePatch

__all__ = ["Role", "RolePatch"]
