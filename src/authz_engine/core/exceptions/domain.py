"""Domain exceptions for the authorization engine.

Four client-facing families (conflict, not found, invalid argument,
forbidden) plus the infrastructure failures raised by the catalog store
and the identity provider adapters.
"""

from typing import Any, Dict, Optional

from .base import AuthzError


# Conflict
class ConflictError(AuthzError):
    """Raised when an operation conflicts with existing state."""
    pass


class DuplicateEntityError(ConflictError):
    """Raised when a name is already registered."""

    def __init__(self, entity_type: str, name: str):
        super().__init__(
            f"{entity_type} '{name}' already exists",
            details={"entity_type": entity_type, "name": name},
        )
        self.entity_type = entity_type
        self.name = name


class ConcurrentModificationError(ConflictError):
    """Raised when a versioned attribute write keeps losing to other writers."""
    pass


# Not found
class NotFoundError(AuthzError):
    """Base class for unknown ids and names."""

    entity_type = "Entity"

    def __init__(self, identifier: str, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message or f"{self.entity_type} '{identifier}' not found",
            details={"identifier": identifier, **(details or {})},
        )
        self.identifier = identifier


class ResourceNotFoundError(NotFoundError):
    entity_type = "Resource"


class PermissionNotFoundError(NotFoundError):
    entity_type = "Permission"


class RoleNotFoundError(NotFoundError):
    entity_type = "Role"


class UserNotFoundError(NotFoundError):
    entity_type = "User"


# Invalid argument
class InvalidArgumentError(AuthzError):
    """Raised when a request is well-formed but not acceptable."""
    pass


class InvalidFormatError(InvalidArgumentError):
    """Raised when a name, action or scope fails its pattern."""
    pass


class SystemEntityError(InvalidArgumentError):
    """Raised when mutating or deleting a seeded system entity."""

    def __init__(self, entity_type: str, name: str, operation: str):
        super().__init__(
            f"Cannot {operation} system {entity_type.lower()} '{name}'",
            details={"entity_type": entity_type, "name": name, "operation": operation},
        )


class ReferenceInUseError(InvalidArgumentError):
    """Raised when deleting something that is still referenced."""
    pass


class UnknownPermissionError(InvalidArgumentError):
    """Raised when a permission name is required to exist in the catalog but does not."""

    def __init__(self, permission_name: str):
        super().__init__(
            f"Permission '{permission_name}' does not exist",
            details={"permission": permission_name},
        )
        self.permission_name = permission_name


# Forbidden
class ForbiddenError(AuthzError):
    """The single outcome of a failed authorization check."""
    pass


# Infrastructure
class ConfigurationError(AuthzError):
    """Raised when the engine is misconfigured or used before startup."""
    pass


class CatalogStoreError(AuthzError):
    """Raised when the persistent catalog store fails."""
    pass


class IdentityProviderError(AuthzError):
    """Raised when the identity provider call fails for a reason other than a missing entity."""
    pass
