"""Value objects for authz-engine."""

from .identifiers import (
    PermissionName,
    generate_permission_id,
    generate_resource_id,
    is_valid_permission_name,
    validate_action_name,
    validate_actions,
    validate_permission_names,
    validate_resource_name,
    validate_role_name,
    validate_scope,
)

__all__ = [
    "PermissionName",
    "generate_permission_id",
    "generate_resource_id",
    "is_valid_permission_name",
    "validate_action_name",
    "validate_actions",
    "validate_permission_names",
    "validate_resource_name",
    "validate_role_name",
    "validate_scope",
]
