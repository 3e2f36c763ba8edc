"""HTTP status code mapping for authz-engine exceptions."""

from typing import Dict, Type

from .base import AuthzError
from .domain import (
    CatalogStoreError,
    ConcurrentModificationError,
    ConfigurationError,
    ConflictError,
    DuplicateEntityError,
    ForbiddenError,
    IdentityProviderError,
    InvalidArgumentError,
    InvalidFormatError,
    NotFoundError,
    PermissionNotFoundError,
    ReferenceInUseError,
    ResourceNotFoundError,
    RoleNotFoundError,
    SystemEntityError,
    UnknownPermissionError,
    UserNotFoundError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    InvalidArgumentError: 400,
    InvalidFormatError: 400,
    SystemEntityError: 400,
    ReferenceInUseError: 400,
    UnknownPermissionError: 400,

    # 403 Forbidden
    ForbiddenError: 403,

    # 404 Not Found
    NotFoundError: 404,
    ResourceNotFoundError: 404,
    PermissionNotFoundError: 404,
    RoleNotFoundError: 404,
    UserNotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,
    DuplicateEntityError: 409,
    ConcurrentModificationError: 409,

    # 500 Internal Server Error
    ConfigurationError: 500,
    CatalogStoreError: 500,

    # 503 Service Unavailable
    IdentityProviderError: 503,

    # Default for AuthzError
    AuthzError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Resolve the status code for an exception, walking its MRO.

    Subclasses that are not listed inherit the status of their nearest
    mapped ancestor; non-engine exceptions map to 500.
    """
    for klass in type(exception).__mro__:
        if klass in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[klass]
    return 500
