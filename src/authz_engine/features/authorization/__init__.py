"""Authorization feature: effective permission resolution and request guards."""

from .dependencies import AuthorizationDependencies, get_principal, require_permissions
from .entities import Principal, UserAuthorizationState
from .services import AuthorizationGuard, EffectivePermissionResolver

__all__ = [
    "AuthorizationDependencies",
    "AuthorizationGuard",
    "EffectivePermissionResolver",
    "Principal",
    "UserAuthorizationState",
    "get_principal",
    "require_permissions",
]
