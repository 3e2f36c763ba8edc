"""Human readable descriptions for generated permissions."""

from typing import Optional

ACTION_DESCRIPTIONS = {
    "read": "read",
    "create": "create",
    "update": "update",
    "delete": "delete",
    "manage": "manage",
    "assign": "assign",
    "approve": "approve",
    "publish": "publish",
    "configure": "configure",
    "send": "send",
    "export": "export",
    "impersonate": "impersonate",
    "backup": "back up",
    "maintenance": "maintain",
    "config": "configure",
    "logs": "view the logs of",
    "monitoring": "monitor",
}

RESOURCE_DESCRIPTIONS = {
    "users": "users",
    "roles": "roles",
    "permissions": "permissions",
    "documents": "documents",
    "services": "services",
    "system": "system",
    "notifications": "notifications",
    "reports": "reports",
    "analytics": "analytics",
}

SCOPE_DESCRIPTIONS = {
    "own": "own",
    "all": "all",
}


def describe_permission(resource: str, action: str, scope: Optional[str] = None) -> str:
    """Build a description such as ``Allows to read own documents``."""
    action_desc = ACTION_DESCRIPTIONS.get(action, action.replace("_", " "))
    resource_desc = RESOURCE_DESCRIPTIONS.get(resource, resource.replace("_", " "))
    if scope:
        scope_desc = SCOPE_DESCRIPTIONS.get(scope, scope.replace("_", " "))
        return f"Allows to {action_desc} {scope_desc} {resource_desc}"
    return f"Allows to {action_desc} the {resource_desc}"
