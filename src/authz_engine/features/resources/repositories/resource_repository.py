"""AsyncPG-based resource repository implementation."""

import logging
from typing import List, Optional

import asyncpg

from ....core.exceptions import CatalogStoreError, DuplicateEntityError
from ....database import DRIVER_ERRORS, CatalogDatabase, RESOURCES_TABLE
from ..entities import Resource

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, description, actions, category, default_scope, is_system, created_at, updated_at"


class AsyncPGResourceRepository:
    """AsyncPG implementation of ResourceRepository protocol."""

    def __init__(self, database: CatalogDatabase):
        self.database = database

    def _build_resource_from_row(self, row: asyncpg.Record) -> Resource:
        return Resource(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            actions=list(row["actions"] or []),
            category=row["category"],
            default_scope=row["default_scope"],
            is_system=row["is_system"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def create(self, resource: Resource) -> Resource:
        query = f"""
            INSERT INTO {RESOURCES_TABLE} ({_COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING {_COLUMNS}
        """
        try:
            async with self.database.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    resource.id,
                    resource.name,
                    resource.description,
                    list(resource.actions),
                    resource.category,
                    resource.default_scope,
                    resource.is_system,
                    resource.created_at,
                    resource.updated_at,
                )
            return self._build_resource_from_row(row)
        except asyncpg.UniqueViolationError:
            raise DuplicateEntityError("Resource", resource.name)
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to create resource {resource.name}: {e}")
            raise CatalogStoreError(f"Failed to create resource: {e}")

    async def get_by_name(self, name: str) -> Optional[Resource]:
        query = f"SELECT {_COLUMNS} FROM {RESOURCES_TABLE} WHERE name = $1"
        try:
            async with self.database.acquire() as conn:
                row = await conn.fetchrow(query, name)
            return self._build_resource_from_row(row) if row else None
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to get resource by name {name}: {e}")
            raise CatalogStoreError(f"Failed to retrieve resource: {e}")

    async def list_all(self) -> List[Resource]:
        query = f"SELECT {_COLUMNS} FROM {RESOURCES_TABLE} ORDER BY name"
        try:
            async with self.database.acquire() as conn:
                rows = await conn.fetch(query)
            return [self._build_resource_from_row(row) for row in rows]
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to list resources: {e}")
            raise CatalogStoreError(f"Failed to list resources: {e}")

    async def update(self, resource: Resource) -> Resource:
        query = f"""
            UPDATE {RESOURCES_TABLE}
            SET description = $2, actions = $3, category = $4, default_scope = $5, updated_at = $6
            WHERE id = $1
            RETURNING {_COLUMNS}
        """
        try:
            async with self.database.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    resource.id,
                    resource.description,
                    list(resource.actions),
                    resource.category,
                    resource.default_scope,
                    resource.updated_at,
                )
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to update resource {resource.name}: {e}")
            raise CatalogStoreError(f"Failed to update resource: {e}")

        if row is None:
            raise CatalogStoreError(f"Resource {resource.id} vanished from the catalog store")
        return self._build_resource_from_row(row)

    async def delete(self, resource_id: str) -> bool:
        query = f"DELETE FROM {RESOURCES_TABLE} WHERE id = $1"
        try:
            async with self.database.acquire() as conn:
                result = await conn.execute(query, resource_id)
            return result.split()[-1] != "0"
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to delete resource {resource_id}: {e}")
            raise CatalogStoreError(f"Failed to delete resource: {e}")
