"""Persistent catalog store (PostgreSQL via asyncpg)."""

from .connection import DRIVER_ERRORS, CatalogDatabase
from .schema import CATALOG_SCHEMA_DDL, PERMISSIONS_TABLE, RESOURCES_TABLE

__all__ = ["DRIVER_ERRORS", "CatalogDatabase", "CATALOG_SCHEMA_DDL", "PERMISSIONS_TABLE", "RESOURCES_TABLE"]
