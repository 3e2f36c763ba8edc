"""Resource registry service.

Defines named resources and their allowed actions. Creating or changing a
resource cascades into the permission catalog: one permission per action,
named ``resource:action`` or ``resource:action:default_scope``.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional, Set

from ....config.constants import DEFAULT_CATEGORY, SYSTEM_RESOURCES
from ....core.exceptions import (
    CatalogStoreError,
    DuplicateEntityError,
    ResourceNotFoundError,
    SystemEntityError,
)
from ....core.shared import CatalogIndex
from ....core.value_objects import (
    generate_resource_id,
    validate_actions,
    validate_resource_name,
    validate_scope,
)
from ...catalog_sync import KIND_RESOURCE, CatalogChangeNotifier, NullCatalogNotifier
from ...permissions import PermissionCatalog
from ..entities import Resource, ResourcePatch, ResourceRepository

logger = logging.getLogger(__name__)


class ResourceRegistry:
    """Registry of resources backed by the persistent catalog store."""

    def __init__(
        self,
        repository: ResourceRepository,
        permission_catalog: PermissionCatalog,
        notifier: Optional[CatalogChangeNotifier] = None,
    ):
        self.repository = repository
        self.permission_catalog = permission_catalog
        self.notifier = notifier or NullCatalogNotifier()
        self._index: CatalogIndex[Resource] = CatalogIndex()

    # Startup

    async def initialize(self) -> None:
        """Seed system resources, then load every persisted resource."""
        try:
            await self.seed_system_resources()
            await self.reload()
        except CatalogStoreError as e:
            logger.error(f"Resource store unavailable, seeding system resources in memory only: {e}")
            for resource in self._system_resources():
                if resource.name not in self._index:
                    self._index.put(resource)

    async def seed_system_resources(self) -> int:
        """Persist every missing system resource. Safe to call repeatedly.

        System resources do not generate permissions; the system permission
        seed already covers them.
        """
        created = 0
        for resource in self._system_resources():
            if await self.repository.get_by_name(resource.name) is not None:
                continue
            self._index.put(await self.repository.create(resource))
            created += 1
            logger.info(f"System resource created: {resource.name}")
        return created

    async def reload(self) -> None:
        resources = await self.repository.list_all()
        self._index.replace_all(resources)
        logger.info(f"Loaded {len(resources)} resources from the catalog store")

    @staticmethod
    def _system_resources() -> List[Resource]:
        return [
            Resource(
                id=generate_resource_id(),
                name=name,
                description=description,
                actions=list(actions),
                category=category,
                is_system=True,
            )
            for name, description, actions, category in SYSTEM_RESOURCES
        ]

    # Queries

    def get_by_id(self, resource_id: str) -> Optional[Resource]:
        return self._index.get(resource_id)

    def get_by_name(self, name: str) -> Optional[Resource]:
        return self._index.get_by_name(name)

    def list_all(self) -> List[Resource]:
        return sorted(self._index.values(), key=lambda resource: resource.name)

    def search(self, query: Optional[str]) -> List[Resource]:
        """Case-insensitive substring search over name, description, category and actions."""
        if not query:
            return self.list_all()
        return [resource for resource in self.list_all() if resource.matches(query)]

    # Mutations

    async def create(
        self,
        name: str,
        description: str,
        actions: List[str],
        category: Optional[str] = None,
        default_scope: Optional[str] = None,
    ) -> Resource:
        """Register a resource and generate its permissions."""
        if name in self._index:
            raise DuplicateEntityError("Resource", name)

        validate_resource_name(name)
        actions = validate_actions(actions)
        validate_scope(default_scope)

        resource = Resource(
            id=generate_resource_id(),
            name=name,
            description=description or "",
            actions=actions,
            category=category or DEFAULT_CATEGORY,
            default_scope=default_scope,
        )
        new_names = {
            permission_name
            for permission_name in resource.permission_names()
            if not self.permission_catalog.exists(permission_name)
        }
        resource = await self.repository.create(resource)
        self._index.put(resource)

        try:
            permissions = await self.permission_catalog.create_for_resource(
                resource.name, resource.actions, resource.default_scope, resource.category
            )
        except CatalogStoreError:
            await self._rollback_create(resource, new_names)
            raise
        logger.info(f"Resource created: {resource.name} with {len(resource.actions)} actions ({len(permissions)} new permissions)")
        await self.notifier.publish(KIND_RESOURCE, "created", resource.name)
        return resource

    async def update(self, resource_id: str, patch: ResourcePatch) -> Resource:
        """Apply a partial update; regenerates permissions when actions or default scope change.

        Permissions that would disappear are checked for role references
        before anything is written, so a rejected update leaves no trace.
        """
        resource = self._require(resource_id)
        if resource.is_system:
            raise SystemEntityError("Resource", resource.name, "update")

        actions = validate_actions(patch.actions) if patch.actions is not None else resource.actions
        if patch.clear_default_scope:
            default_scope = None
        elif patch.default_scope is not None:
            default_scope = validate_scope(patch.default_scope)
        else:
            default_scope = resource.default_scope

        updated = replace(
            resource,
            description=patch.description if patch.description is not None else resource.description,
            actions=list(actions),
            category=patch.category if patch.category is not None else resource.category,
            default_scope=default_scope,
            updated_at=datetime.now(timezone.utc),
        )

        regenerate = updated.actions != resource.actions or updated.default_scope != resource.default_scope
        obsolete = set()
        if regenerate:
            keep = set(updated.permission_names())
            obsolete = {
                permission.name
                for permission in self.permission_catalog.list_by_resource(resource.name)
                if not permission.is_system and permission.name not in keep
            }
            await self.permission_catalog.ensure_unreferenced(obsolete)

        updated = await self.repository.update(updated)
        self._index.put(updated)

        if regenerate:
            if obsolete:
                await self.permission_catalog.delete_for_resource(resource.name, obsolete, check_references=False)
            await self.permission_catalog.create_for_resource(
                updated.name, updated.actions, updated.default_scope, updated.category
            )

        logger.info(f"Resource updated: {updated.name}")
        await self.notifier.publish(KIND_RESOURCE, "updated", updated.name)
        return updated

    async def delete(self, resource_id: str) -> None:
        """Delete a custom resource and every custom permission it owns."""
        resource = self._require(resource_id)
        if resource.is_system:
            raise SystemEntityError("Resource", resource.name, "delete")

        removed = await self.permission_catalog.delete_for_resource(resource.name)
        await self.repository.delete(resource.id)
        self._index.remove(resource.id)
        logger.info(f"Resource deleted: {resource.name} ({len(removed)} permissions removed)")
        await self.notifier.publish(KIND_RESOURCE, "deleted", resource.name)

    async def _rollback_create(self, resource: Resource, new_names: Set[str]) -> None:
        """Undo a create whose permission generation failed part way."""
        logger.warning(f"Permission generation failed for resource {resource.name}; rolling back")
        try:
            await self.permission_catalog.delete_for_resource(resource.name, new_names, check_references=False)
            await self.repository.delete(resource.id)
        except CatalogStoreError as e:
            logger.error(f"Rollback of resource {resource.name} failed, it may be left with partial permissions: {e}")
            return
        self._index.remove(resource.id)

    def _require(self, resource_id: str) -> Resource:
        resource = self._index.get(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)
        return resource
