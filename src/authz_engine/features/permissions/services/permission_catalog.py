"""Permission catalog service.

Holds the canonical ``resource:action[:scope]`` permissions in an
in-memory index backed by the persistent catalog store. System
permissions are seeded at startup and are immutable; custom permissions
cannot be deleted while a role still lists them.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from ....config.constants import SYSTEM_PERMISSIONS, ResourceCategory
from ....core.exceptions import (
    CatalogStoreError,
    DuplicateEntityError,
    InvalidFormatError,
    PermissionNotFoundError,
    ReferenceInUseError,
    SystemEntityError,
    UnknownPermissionError,
)
from ....core.shared import CatalogIndex
from ....core.value_objects import PermissionName, generate_permission_id, validate_scope
from ...catalog_sync import KIND_PERMISSION, CatalogChangeNotifier, NullCatalogNotifier
from ...identity import IdentityProvider, RoleAttributeBag
from ..entities import Permission, PermissionPatch, PermissionRepository, describe_permission

logger = logging.getLogger(__name__)


class PermissionCatalog:
    """Canonical list of permissions with referential-integrity checks."""

    def __init__(
        self,
        repository: PermissionRepository,
        identity_provider: IdentityProvider,
        notifier: Optional[CatalogChangeNotifier] = None,
    ):
        self.repository = repository
        self.identity_provider = identity_provider
        self.notifier = notifier or NullCatalogNotifier()
        self._index: CatalogIndex[Permission] = CatalogIndex()
        self.in_memory_only = False

    # Startup

    async def initialize(self) -> None:
        """Seed system permissions and load the catalog.

        A store failure falls back to an in-memory seed so request-time
        checks never start against an empty catalog.
        """
        try:
            await self.seed_system_permissions()
            await self.reload()
            self.in_memory_only = False
        except CatalogStoreError as e:
            logger.error(f"Permission catalog store unavailable, seeding in memory only: {e}")
            self._seed_in_memory()
            self.in_memory_only = True

    async def seed_system_permissions(self) -> int:
        """Persist every missing system permission. Safe to call repeatedly."""
        created = 0
        for name in SYSTEM_PERMISSIONS:
            if await self.repository.get_by_name(name) is not None:
                continue
            permission = await self.repository.create(self._build_system_permission(name))
            self._index.put(permission)
            created += 1
            logger.info(f"System permission created: {name}")

        if created:
            logger.info(f"Seeded {created} system permissions")
        return created

    async def reload(self) -> None:
        """Replace the in-memory index with the persisted catalog."""
        permissions = await self.repository.list_all()
        self._index.replace_all(permissions)
        logger.info(f"Loaded {len(permissions)} permissions from the catalog store")

    def _seed_in_memory(self) -> None:
        for name in SYSTEM_PERMISSIONS:
            if name not in self._index:
                self._index.put(self._build_system_permission(name))

    def _build_system_permission(self, name: str) -> Permission:
        parsed = PermissionName.parse(name)
        return Permission(
            id=generate_permission_id(),
            name=name,
            description=describe_permission(parsed.resource, parsed.action, parsed.scope),
            resource=parsed.resource,
            action=parsed.action,
            scope=parsed.scope,
            category=ResourceCategory.SYSTEM.value,
            is_system=True,
        )

    # Queries

    def get_by_id(self, permission_id: str) -> Optional[Permission]:
        return self._index.get(permission_id)

    def get_by_name(self, name: str) -> Optional[Permission]:
        return self._index.get_by_name(name)

    def exists(self, name: str) -> bool:
        return name in self._index

    def missing(self, names: Iterable[str]) -> List[str]:
        """Return the names that are not in the catalog, in input order."""
        return [name for name in names if name not in self._index]

    def ensure_exists(self, names: Iterable[str]) -> None:
        """Fail with UnknownPermissionError naming the first name missing from the catalog."""
        missing = self.missing(names)
        if missing:
            error = UnknownPermissionError(missing[0])
            error.details["missing"] = missing
            raise error

    def list_all(self) -> List[Permission]:
        return sorted(self._index.values(), key=lambda permission: permission.name)

    def list_by_resource(self, resource: str) -> List[Permission]:
        return [permission for permission in self.list_all() if permission.resource == resource]

    def search(self, query: Optional[str]) -> List[Permission]:
        """Case-insensitive substring search over name, description, resource, action and category."""
        if not query:
            return self.list_all()
        return [permission for permission in self.list_all() if permission.matches(query)]

    # Mutations

    async def create(
        self,
        name: str,
        description: str = "",
        resource: Optional[str] = None,
        action: Optional[str] = None,
        scope: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Permission:
        """Create a custom permission.

        ``resource``, ``action`` and ``scope`` default to the parts of
        ``name``; when given they must agree with it.
        """
        if name in self._index:
            raise DuplicateEntityError("Permission", name)

        parsed = PermissionName.parse(name)
        self._check_parts_match(parsed, resource, action, scope)

        permission = Permission(
            id=generate_permission_id(),
            name=name,
            description=description or describe_permission(parsed.resource, parsed.action, parsed.scope),
            resource=parsed.resource,
            action=parsed.action,
            scope=parsed.scope,
            category=category or ResourceCategory.CUSTOM.value,
            is_system=False,
        )
        permission = await self.repository.create(permission)
        self._index.put(permission)
        logger.info(f"Permission created: {name}")
        await self.notifier.publish(KIND_PERMISSION, "created", name)
        return permission

    async def update(self, permission_id: str, patch: PermissionPatch) -> Permission:
        """Update description, scope or category of a custom permission."""
        permission = self._require(permission_id)
        if permission.is_system:
            raise SystemEntityError("Permission", permission.name, "update")

        if patch.scope is not None:
            validate_scope(patch.scope)
            if patch.scope != permission.scope:
                raise InvalidFormatError(
                    f"Scope '{patch.scope}' does not match permission name '{permission.name}'",
                    details={"field": "scope", "value": patch.scope},
                )

        updated = replace(
            permission,
            description=patch.description if patch.description is not None else permission.description,
            category=patch.category if patch.category is not None else permission.category,
            updated_at=datetime.now(timezone.utc),
        )
        updated = await self.repository.update(updated)
        self._index.put(updated)
        logger.info(f"Permission updated: {updated.name}")
        await self.notifier.publish(KIND_PERMISSION, "updated", updated.name)
        return updated

    async def delete(self, permission_id: str) -> None:
        """Delete a custom permission that no role references."""
        permission = self._require(permission_id)
        if permission.is_system:
            raise SystemEntityError("Permission", permission.name, "delete")

        await self.ensure_unreferenced([permission.name])
        await self._delete(permission)

    async def create_for_resource(
        self,
        resource: str,
        actions: Iterable[str],
        scope: Optional[str],
        category: str,
    ) -> List[Permission]:
        """Create one permission per action, skipping names that already exist."""
        created: List[Permission] = []
        for action in actions:
            name = PermissionName(resource, action, scope).value
            if name in self._index:
                continue
            created.append(await self.create(name, resource=resource, action=action, scope=scope, category=category))
        return created

    async def delete_for_resource(
        self,
        resource: str,
        names: Optional[Set[str]] = None,
        check_references: bool = True,
    ) -> List[Permission]:
        """Delete the custom permissions of ``resource`` (optionally only ``names``).

        The reference check covers the whole batch before anything is deleted.
        """
        targets = [
            permission
            for permission in self.list_by_resource(resource)
            if not permission.is_system and (names is None or permission.name in names)
        ]
        if check_references:
            await self.ensure_unreferenced([permission.name for permission in targets])

        for permission in targets:
            await self._delete(permission)
        return targets

    async def ensure_unreferenced(self, names: Iterable[str]) -> None:
        """Fail with ReferenceInUseError if any role lists one of ``names``."""
        references = await self.find_role_references(names)
        if references:
            summary = ", ".join(f"{name} (roles: {', '.join(roles)})" for name, roles in sorted(references.items()))
            raise ReferenceInUseError(
                f"Permissions still used by roles: {summary}",
                details={"references": references},
            )

    async def find_role_references(self, names: Iterable[str]) -> Dict[str, List[str]]:
        """Map each of ``names`` listed by at least one role to those role names.

        Reads every role from the identity provider; provider failures propagate.
        """
        wanted = set(names)
        if not wanted:
            return {}

        references: Dict[str, List[str]] = {}
        for role in await self.identity_provider.list_roles():
            for name in RoleAttributeBag.decode(role.attributes).permissions:
                if name in wanted:
                    references.setdefault(name, []).append(role.name)
        return references

    async def _delete(self, permission: Permission) -> None:
        await self.repository.delete(permission.id)
        self._index.remove(permission.id)
        logger.info(f"Permission deleted: {permission.name}")
        await self.notifier.publish(KIND_PERMISSION, "deleted", permission.name)

    def _require(self, permission_id: str) -> Permission:
        permission = self._index.get(permission_id)
        if permission is None:
            raise PermissionNotFoundError(permission_id)
        return permission

    @staticmethod
    def _check_parts_match(
        parsed: PermissionName,
        resource: Optional[str],
        action: Optional[str],
        scope: Optional[str],
    ) -> None:
        mismatches = {
            field_name: value
            for field_name, value, expected in (
                ("resource", resource, parsed.resource),
                ("action", action, parsed.action),
                ("scope", scope, parsed.scope),
            )
            if value is not None and value != expected
        }
        if mismatches:
            raise InvalidFormatError(
                f"Permission name '{parsed.value}' does not match {', '.join(sorted(mismatches))}",
                details={"name": parsed.value, **mismatches},
            )
