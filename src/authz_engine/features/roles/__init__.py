"""Role store feature."""

from .entities import Role, RolePatch
from .services import RoleStore

__all__ = ["Role", "RolePatch", "RoleStore"]
