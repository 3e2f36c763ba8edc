"""Constants and enums for authz-engine.

Seeded catalog contents (system resources, system permissions, system
roles), the reserved attribute keys used at the identity provider boundary
and the naming patterns shared by every catalog.
"""

from enum import Enum
from typing import Dict, Final, List, Tuple


class ResourceCategory(str, Enum):
    """Predefined resource categories."""

    SYSTEM = "system"
    BUSINESS = "business"
    ADMINISTRATION = "administration"
    FINANCE = "finance"
    HR = "hr"
    CUSTOM = "custom"


class CommonScope(str, Enum):
    """Well-known permission scopes."""

    OWN = "own"
    ALL = "all"
    DEPARTMENT = "department"
    TEAM = "team"


class SystemRole(str, Enum):
    """Fixed set of seeded roles that cannot be mutated or deleted."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
    GUEST = "guest"


class NamePatterns:
    """Regular expressions for catalog names."""

    RESOURCE: Final[str] = r"^[a-z_]+$"
    ACTION: Final[str] = r"^[a-z_]+$"
    PERMISSION: Final[str] = r"^[a-z_]+:[a-z_]+(:[a-z_]+)?$"
    ROLE: Final[str] = r"^[a-zA-Z0-9_-]+$"


class AttributeKeys:
    """Reserved keys in the identity provider attribute bags."""

    ROLE_PERMISSIONS: Final[str] = "permissions"
    ROLE_CHILD_ROLES: Final[str] = "childRoles"
    USER_DIRECT_PERMISSIONS: Final[str] = "directPermissions"
    VERSION: Final[str] = "authzVersion"

    ROLE_RESERVED: Final[Tuple[str, ...]] = (ROLE_PERMISSIONS, ROLE_CHILD_ROLES, VERSION)
    USER_RESERVED: Final[Tuple[str, ...]] = (USER_DIRECT_PERMISSIONS, VERSION)


class IdPrefixes:
    """Prefixes of the opaque ids generated for catalog records."""

    RESOURCE: Final[str] = "res_"
    PERMISSION: Final[str] = "perm_"


DEFAULT_CATEGORY: Final[str] = ResourceCategory.CUSTOM.value


# (name, description, actions, category)
SYSTEM_RESOURCES: Final[List[Tuple[str, str, List[str], str]]] = [
    (
        "users",
        "Management of system users",
        ["read", "create", "update", "delete", "manage", "impersonate"],
        ResourceCategory.SYSTEM.value,
    ),
    (
        "roles",
        "Management of roles and permissions",
        ["read", "create", "update", "delete", "assign"],
        ResourceCategory.SYSTEM.value,
    ),
    (
        "permissions",
        "Management of system permissions",
        ["read", "create", "update", "delete", "assign"],
        ResourceCategory.SYSTEM.value,
    ),
    (
        "system",
        "System administration",
        ["config", "logs", "monitoring", "backup", "maintenance"],
        ResourceCategory.SYSTEM.value,
    ),
    (
        "documents",
        "Document management",
        ["read", "create", "update", "delete", "approve", "publish"],
        ResourceCategory.BUSINESS.value,
    ),
    (
        "services",
        "Service management",
        ["read", "create", "update", "delete", "manage", "configure"],
        ResourceCategory.BUSINESS.value,
    ),
]


SYSTEM_PERMISSIONS: Final[List[str]] = [
    # Users
    "users:read",
    "users:create",
    "users:update",
    "users:delete",
    "users:manage",
    "users:impersonate",
    # Roles
    "roles:read",
    "roles:create",
    "roles:update",
    "roles:delete",
    "roles:assign",
    # Permissions
    "permissions:read",
    "permissions:create",
    "permissions:update",
    "permissions:delete",
    "permissions:assign",
    # System administration
    "system:config",
    "system:logs",
    "system:monitoring",
    "system:backup",
    "system:maintenance",
    # Documents
    "documents:read",
    "documents:read:own",
    "documents:create",
    "documents:update",
    "documents:update:own",
    "documents:delete",
    "documents:delete:own",
    "documents:approve",
    "documents:publish",
    # Services
    "services:read",
    "services:create",
    "services:update",
    "services:delete",
    "services:manage",
    "services:configure",
    # Notifications
    "notifications:read",
    "notifications:send",
    "notifications:manage",
    # Reports and analytics
    "reports:read",
    "reports:create",
    "reports:export",
    "analytics:read",
    "analytics:manage",
]


_ADMIN_PERMISSIONS: Final[List[str]] = [
    "users:read",
    "users:create",
    "users:update",
    "users:delete",
    "roles:read",
    "roles:create",
    "roles:update",
    "roles:assign",
    "permissions:read",
    "permissions:create",
    "permissions:update",
    "permissions:delete",
    "permissions:assign",
    "system:logs",
    "documents:read",
    "documents:create",
    "documents:update",
    "documents:delete",
    "services:read",
    "services:manage",
]

# role name -> (description, permissions)
SYSTEM_ROLE_DEFINITIONS: Final[Dict[str, Tuple[str, List[str]]]] = {
    SystemRole.SUPER_ADMIN.value: (
        "Super administrator with every system permission",
        list(SYSTEM_PERMISSIONS),
    ),
    SystemRole.ADMIN.value: ("System administrator", _ADMIN_PERMISSIONS),
    SystemRole.MODERATOR.value: (
        "Moderator with limited rights",
        [
            "users:read",
            "users:update",
            "roles:read",
            "documents:read",
            "documents:create",
            "documents:update",
            "services:read",
        ],
    ),
    SystemRole.USER.value: ("Standard user", ["documents:read", "services:read"]),
    SystemRole.GUEST.value: ("Guest with minimal access", ["services:read"]),
}


def is_system_role(role_name: str) -> bool:
    """Check whether a role name belongs to the fixed system role set."""
    return role_name in SYSTEM_ROLE_DEFINITIONS
