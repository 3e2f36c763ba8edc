"""Exception hierarchy for authz-engine."""

from .base import (
    AuthzError,
    create_error_response,
    get_http_status_code,
)
from .domain import (
    # Conflict
    ConflictError,
    DuplicateEntityError,
    ConcurrentModificationError,

    # Not found
    NotFoundError,
    ResourceNotFoundError,
    PermissionNotFoundError,
    RoleNotFoundError,
    UserNotFoundError,

    # Invalid argument
    InvalidArgumentError,
    InvalidFormatError,
    SystemEntityError,
    ReferenceInUseError,
    UnknownPermissionError,

    # Forbidden
    ForbiddenError,

    # Infrastructure
    ConfigurationError,
    CatalogStoreError,
    IdentityProviderError,
)
from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    "AuthzError",
    "create_error_response",
    "get_http_status_code",
    "HTTP_STATUS_MAP",
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
]
