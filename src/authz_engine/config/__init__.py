"""Configuration for authz-engine: settings, logging and seeded constants."""

from .constants import (
    AttributeKeys,
    CommonScope,
    IdPrefixes,
    NamePatterns,
    ResourceCategory,
    SystemRole,
    SYSTEM_PERMISSIONS,
    SYSTEM_RESOURCES,
    SYSTEM_ROLE_DEFINITIONS,
    is_system_role,
)
from .logging_config import LoggingConfig, get_logger, setup_logging
from .settings import AuthzSettings, get_settings

__all__ = [
    "AttributeKeys",
    "CommonScope",
    "IdPrefixes",
    "NamePatterns",
    "ResourceCategory",
    "SystemRole",
    "SYSTEM_PERMISSIONS",
    "SYSTEM_RESOURCES",
    "SYSTEM_ROLE_DEFINITIONS",
    "is_system_role",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "AuthzSettings",
    "get_settings",
]
