"""authz-engine - fine-grained authorization on top of an external identity provider.

Resources, permissions (``resource:action[:scope]``) and roles are defined
here; users, roles and their attribute bags live in Keycloak. The engine
resolves each user's effective permission set and enforces it per request.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__
from .config import AuthzSettings, get_settings
from .core.exceptions import (
    AuthzError,
    ConflictError,
    DuplicateEntityError,
    ConcurrentModificationError,
    NotFoundError,
    ResourceNotFoundError,
    PermissionNotFoundError,
    RoleNotFoundError,
    UserNotFoundError,
    InvalidArgumentError,
    InvalidFormatError,
    SystemEntityError,
    ReferenceInUseError,
    UnknownPermissionError,
    ForbiddenError,
    ConfigurationError,
    CatalogStoreError,
    IdentityProviderError,
    create_error_response,
    get_http_status_code,
)
from .features.authorization import (
    AuthorizationGuard,
    EffectivePermissionResolver,
    Principal,
    UserAuthorizationState,
    require_permissions,
)
from .features.permissions import Permission, PermissionCatalog, PermissionPatch
from .features.resources import Resource, ResourcePatch, ResourceRegistry
from .features.roles import Role, RolePatch, RoleStore
from .api import register_exception_handlers
from .engine import AuthorizationEngine

__all__ = [
    "__version__",
    "AuthzSettings",
    "get_settings",
    # Errors
    "AuthzError",
    "ConflictError",
    "DuplicateEntityError",
    "ConcurrentModificationError",
    "NotFoundError",
    "ResourceNotFoundError",
    "PermissionNotFoundError",
    "RoleNotFoundError",
    "UserNotFoundError",
    "InvalidArgumentError",
    "InvalidFormatError",
    "SystemEntityError",
    "ReferenceInUseError",
    "UnknownPermissionError",
    "ForbiddenError",
    "ConfigurationError",
    "CatalogStoreError",
    "IdentityProviderError",
    "create_error_response",
    "get_http_status_code",
    # Services
    "AuthorizationEngine",
    "AuthorizationGuard",
    "EffectivePermissionResolver",
    "PermissionCatalog",
    "ResourceRegistry",
    "RoleStore",
    # Entities
    "Permission",
    "PermissionPatch",
    "Principal",
    "Resource",
    "ResourcePatch",
    "Role",
    "RolePatch",
    "UserAuthorizationState",
    # FastAPI
    "register_exception_handlers",
    "require_permissions",
]
