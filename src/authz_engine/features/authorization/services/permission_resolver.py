"""Effective permission resolution.

A user's effective permissions are the union of the direct grants in the
user's attribute bag and the permissions of every mapped role, expanding
composite roles recursively. Each role is expanded at most once per
resolution, so composite cycles terminate.
"""

import logging
from typing import List, Set

from ....core.exceptions import UserNotFoundError
from ....core.value_objects import validate_permission_names
from ...identity import AttributeUpdater, IdentityProvider, UserAttributeBag
from ...permissions import PermissionCatalog
from ...roles import RoleStore
from ..entities import UserAuthorizationState

logger = logging.getLogger(__name__)


class EffectivePermissionResolver:
    """Computes effective permission sets and manages direct grants."""

    def __init__(
        self,
        identity_provider: IdentityProvider,
        role_store: RoleStore,
        permission_catalog: PermissionCatalog,
        attribute_updater: AttributeUpdater,
    ):
        self.identity_provider = identity_provider
        self.role_store = role_store
        self.permission_catalog = permission_catalog
        self.attribute_updater = attribute_updater

    async def resolve_for_user(self, user_id: str) -> UserAuthorizationState:
        user = await self.identity_provider.get_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        direct = UserAttributeBag.decode(user.attributes).direct_permissions
        roles = await self.identity_provider.get_user_roles(user_id)

        effective: Set[str] = set(direct)
        expanded: Set[str] = set()
        for role_name in roles:
            effective |= await self._expand_role(role_name, expanded, [])

        return UserAuthorizationState(
            user_id=user_id,
            roles=list(roles),
            direct_permissions=list(direct),
            effective_permissions=effective,
        )

    async def get_user_permissions(self, user_id: str) -> Set[str]:
        return (await self.resolve_for_user(user_id)).effective_permissions

    async def has_permission(self, user_id: str, permission_name: str) -> bool:
        return permission_name in await self.get_user_permissions(user_id)

    async def assign_direct(self, user_id: str, permissions: List[str]) -> UserAuthorizationState:
        """Grant catalog permissions directly to a user (union with existing grants)."""
        if await self.identity_provider.get_user_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

        permissions = validate_permission_names(permissions)
        self.permission_catalog.ensure_exists(permissions)

        def mutate(record, bag: UserAttributeBag) -> None:
            bag.direct_permissions = bag.direct_permissions + [
                permission for permission in permissions if permission not in bag.direct_permissions
            ]

        await self.attribute_updater.update_user(user_id, mutate)
        logger.info(f"Direct permissions assigned to user {user_id}: {', '.join(permissions)}")
        return await self.resolve_for_user(user_id)

    async def _expand_role(self, role_name: str, expanded: Set[str], path: List[str]) -> Set[str]:
        if role_name in path:
            logger.warning(f"Composite role cycle ignored: {' -> '.join(path + [role_name])}")
            return set()
        if role_name in expanded:
            return set()
        expanded.add(role_name)

        role = await self.role_store.get_role(role_name)
        if role is None:
            logger.warning(f"Role '{role_name}' is mapped but does not exist; skipping")
            return set()

        permissions = set(role.permissions)
        if role.composite:
            for child in role.child_roles:
                permissions |= await self._expand_role(child, expanded, path + [role_name])
        return permissions
