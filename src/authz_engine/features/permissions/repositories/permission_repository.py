"""AsyncPG-based permission repository implementation."""

import logging
from typing import List, Optional

import asyncpg

from ....core.exceptions import CatalogStoreError, DuplicateEntityError
from ....database import DRIVER_ERRORS, CatalogDatabase, PERMISSIONS_TABLE
from ..entities import Permission

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, description, resource, action, scope, category, is_system, created_at, updated_at"


class AsyncPGPermissionRepository:
    """AsyncPG implementation of PermissionRepository protocol."""

    def __init__(self, database: CatalogDatabase):
        self.database = database

    def _build_permission_from_row(self, row: asyncpg.Record) -> Permission:
        """Build Permission entity from database row."""
        return Permission(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            resource=row["resource"],
            action=row["action"],
            scope=row["scope"],
            category=row["category"],
            is_system=row["is_system"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def create(self, permission: Permission) -> Permission:
        query = f"""
            INSERT INTO {PERMISSIONS_TABLE} ({_COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            RETURNING {_COLUMNS}
        """
        try:
            async with self.database.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    permission.id,
                    permission.name,
                    permission.description,
                    permission.resource,
                    permission.action,
                    permission.scope,
                    permission.category,
                    permission.is_system,
                    permission.created_at,
                    permission.updated_at,
                )
            return self._build_permission_from_row(row)
        except asyncpg.UniqueViolationError:
            raise DuplicateEntityError("Permission", permission.name)
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to create permission {permission.name}: {e}")
            raise CatalogStoreError(f"Failed to create permission: {e}")

    async def get_by_name(self, name: str) -> Optional[Permission]:
        query = f"SELECT {_COLUMNS} FROM {PERMISSIONS_TABLE} WHERE name = $1"
        try:
            async with self.database.acquire() as conn:
                row = await conn.fetchrow(query, name)
            return self._build_permission_from_row(row) if row else None
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to get permission by name {name}: {e}")
            raise CatalogStoreError(f"Failed to retrieve permission: {e}")

    async def list_all(self) -> List[Permission]:
        query = f"SELECT {_COLUMNS} FROM {PERMISSIONS_TABLE} ORDER BY name"
        try:
            async with self.database.acquire() as conn:
                rows = await conn.fetch(query)
            return [self._build_permission_from_row(row) for row in rows]
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to list permissions: {e}")
            raise CatalogStoreError(f"Failed to list permissions: {e}")

    async def update(self, permission: Permission) -> Permission:
        query = f"""
            UPDATE {PERMISSIONS_TABLE}
            SET description = $2, scope = $3, category = $4, updated_at = $5
            WHERE id = $1
            RETURNING {_COLUMNS}
        """
        try:
            async with self.database.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    permission.id,
                    permission.description,
                    permission.scope,
                    permission.category,
                    permission.updated_at,
                )
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to update permission {permission.name}: {e}")
            raise CatalogStoreError(f"Failed to update permission: {e}")

        if row is None:
            raise CatalogStoreError(f"Permission {permission.id} vanished from the catalog store")
        return self._build_permission_from_row(row)

    async def delete(self, permission_id: str) -> bool:
        query = f"DELETE FROM {PERMISSIONS_TABLE} WHERE id = $1"
        try:
            async with self.database.acquire() as conn:
                result = await conn.execute(query, permission_id)
            return result.split()[-1] != "0"
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to delete permission {permission_id}: {e}")
            raise CatalogStoreError(f"Failed to delete permission: {e}")
