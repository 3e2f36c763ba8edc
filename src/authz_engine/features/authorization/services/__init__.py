from .authorization_guard import AuthorizationGuard
from .permission_resolver import EffectivePermissionResolver

__all__ = ["AuthorizationGuard", "EffectivePermissionResolver"]
