"""Role store service.

Roles, their composite links and user role mappings are owned by the
identity provider. Permissions, mirrored child roles and custom
attributes are kept in the role's attribute bag and written through the
versioned AttributeUpdater.
"""

import logging
from typing import Dict, List, Optional

from ....config.constants import AttributeKeys, SYSTEM_ROLE_DEFINITIONS, is_system_role
from ....core.exceptions import (
    AuthzError,
    DuplicateEntityError,
    IdentityProviderError,
    InvalidArgumentError,
    InvalidFormatError,
    PermissionNotFoundError,
    ReferenceInUseError,
    RoleNotFoundError,
    SystemEntityError,
    UserNotFoundError,
)
from ....core.value_objects import validate_permission_names, validate_role_name
from ...identity import AttributeUpdater, IdentityProvider, RoleAttributeBag
from ...permissions import PermissionCatalog
from ..entities import Role, RolePatch

logger = logging.getLogger(__name__)


class RoleStore:
    """Role management on top of the identity provider."""

    def __init__(
        self,
        identity_provider: IdentityProvider,
        permission_catalog: PermissionCatalog,
        attribute_updater: Optional[AttributeUpdater] = None,
        strict_permissions: bool = True,
    ):
        self.identity_provider = identity_provider
        self.permission_catalog = permission_catalog
        self.attribute_updater = attribute_updater or AttributeUpdater(identity_provider)
        self.strict_permissions = strict_permissions

    # Queries

    async def get_role(self, name: str) -> Optional[Role]:
        record = await self.identity_provider.get_role_by_name(name)
        return Role.from_record(record) if record else None

    async def list_roles(self) -> List[Role]:
        """List every role; a provider failure yields an empty list."""
        try:
            records = await self.identity_provider.list_roles()
        except IdentityProviderError as e:
            logger.error(f"Failed to list roles: {e}")
            return []
        return sorted((Role.from_record(record) for record in records), key=lambda role: role.name)

    async def get_role_permissions(self, name: str) -> List[str]:
        return (await self._require_role(name)).permissions

    # Role mutations

    async def create(
        self,
        name: str,
        description: str = "",
        permissions: Optional[List[str]] = None,
        composite: bool = False,
        child_roles: Optional[List[str]] = None,
        attributes: Optional[Dict[str, str]] = None,
    ) -> Role:
        """Create a role, linking ``child_roles`` when it is composite."""
        validate_role_name(name)
        if await self.identity_provider.get_role_by_name(name) is not None:
            raise DuplicateEntityError("Role", name)

        permissions = validate_permission_names(permissions or [])
        if self.strict_permissions:
            self.permission_catalog.ensure_exists(permissions)
        self._check_custom_attributes(attributes)
        child_roles = await self._validate_child_roles(name, composite, child_roles)

        bag = RoleAttributeBag(
            permissions=permissions,
            child_roles=child_roles,
            custom=dict(attributes or {}),
        )
        record = await self.identity_provider.create_role(name, description or "", bag.encode(), composite=composite)
        if child_roles:
            await self.identity_provider.add_composite_roles(name, child_roles)

        logger.info(f"Role created: {name} with {len(permissions)} permissions")
        return Role(
            name=name,
            description=description or "",
            permissions=permissions,
            composite=composite,
            child_roles=child_roles,
            attributes=dict(attributes or {}),
            id=record.id,
        )

    async def update(self, name: str, patch: RolePatch) -> Role:
        """Update a role.

        ``permissions`` replaces the list, ``attributes`` merges, and
        ``child_roles`` is applied as a delta against the current native links.
        """
        role = await self._require_mutable_role(name, "update")

        permissions = None
        if patch.permissions is not None:
            permissions = validate_permission_names(patch.permissions)
            if self.strict_permissions:
                self.permission_catalog.ensure_exists(permissions)
        self._check_custom_attributes(patch.attributes)

        composite = patch.composite if patch.composite is not None else role.composite
        if patch.child_roles is not None:
            target_children = await self._validate_child_roles(name, composite, patch.child_roles)
        elif not composite:
            target_children = []
        else:
            target_children = list(role.child_roles)

        def mutate(record, bag: RoleAttributeBag) -> None:
            if permissions is not None:
                bag.permissions = list(permissions)
            if patch.attributes:
                bag.custom.update(patch.attributes)
            bag.child_roles = list(target_children)

        await self.attribute_updater.update_role(
            name,
            mutate,
            description=patch.description,
            composite=composite if patch.composite is not None else None,
        )

        to_add = [child for child in target_children if child not in role.child_roles]
        to_remove = [child for child in role.child_roles if child not in target_children]
        if to_add:
            await self.identity_provider.add_composite_roles(name, to_add)
        if to_remove:
            await self.identity_provider.remove_composite_roles(name, to_remove)

        logger.info(f"Role updated: {name}")
        return await self._require_role(name)

    async def delete(self, name: str) -> None:
        """Delete a custom role that no user holds."""
        if is_system_role(name):
            raise SystemEntityError("Role", name, "delete")
        await self._require_role(name)

        holders = await self.identity_provider.get_users_with_role(name)
        if holders:
            raise ReferenceInUseError(
                f"Cannot delete role '{name}': {len(holders)} user(s) still hold it",
                details={"role": name, "users": [user.id for user in holders]},
            )

        await self.identity_provider.delete_role(name)
        logger.info(f"Role deleted: {name}")

    async def add_permissions(self, name: str, permissions: List[str]) -> Role:
        """Merge catalog permissions into a role, de-duplicated."""
        await self._require_mutable_role(name, "update")
        permissions = validate_permission_names(permissions)
        self.permission_catalog.ensure_exists(permissions)

        def mutate(record, bag: RoleAttributeBag) -> None:
            bag.permissions = bag.permissions + [p for p in permissions if p not in bag.permissions]

        await self.attribute_updater.update_role(name, mutate)
        logger.info(f"Permissions added to role {name}: {', '.join(permissions)}")
        return await self._require_role(name)

    async def remove_permission(self, name: str, permission_name: str) -> Role:
        await self._require_mutable_role(name, "update")

        def mutate(record, bag: RoleAttributeBag) -> None:
            if permission_name not in bag.permissions:
                raise PermissionNotFoundError(
                    permission_name,
                    message=f"Permission '{permission_name}' is not assigned to role '{name}'",
                    details={"role": name},
                )
            bag.permissions = [p for p in bag.permissions if p != permission_name]

        await self.attribute_updater.update_role(name, mutate)
        logger.info(f"Permission removed from role {name}: {permission_name}")
        return await self._require_role(name)

    # User role mappings

    async def assign_roles_to_user(self, user_id: str, role_names: List[str]) -> List[str]:
        """Map roles to a user and return the user's resulting role names."""
        await self._require_user(user_id)
        for role_name in role_names:
            if await self.identity_provider.get_role_by_name(role_name) is None:
                raise InvalidArgumentError(
                    f"Role '{role_name}' does not exist",
                    details={"role": role_name},
                )

        await self.identity_provider.assign_roles_to_user(user_id, list(role_names))
        logger.info(f"Roles assigned to user {user_id}: {', '.join(role_names)}")
        return await self.get_user_roles(user_id)

    async def remove_roles_from_user(self, user_id: str, role_names: List[str]) -> None:
        await self._require_user(user_id)
        await self.identity_provider.remove_roles_from_user(user_id, list(role_names))
        logger.info(f"Roles removed from user {user_id}: {', '.join(role_names)}")

    async def get_user_roles(self, user_id: str) -> List[str]:
        """Role names mapped to a user; a provider failure yields an empty list."""
        try:
            return await self.identity_provider.get_user_roles(user_id)
        except IdentityProviderError as e:
            logger.error(f"Failed to get roles of user {user_id}: {e}")
            return []

    async def user_has_role(self, user_id: str, role_name: str) -> bool:
        return role_name in await self.get_user_roles(user_id)

    # Startup

    async def initialize_system_roles(self) -> int:
        """Create every missing system role. Safe to call repeatedly."""
        created = 0
        for name, (description, permissions) in SYSTEM_ROLE_DEFINITIONS.items():
            try:
                if await self.identity_provider.get_role_by_name(name) is not None:
                    continue
                await self.create(name, description, permissions=permissions)
                created += 1
                logger.info(f"System role created: {name}")
            except AuthzError as e:
                logger.error(f"Failed to initialize system role {name}: {e}")
        return created

    # Helpers

    async def _require_role(self, name: str) -> Role:
        role = await self.get_role(name)
        if role is None:
            raise RoleNotFoundError(name)
        return role

    async def _require_mutable_role(self, name: str, operation: str) -> Role:
        role = await self._require_role(name)
        if role.is_system:
            raise SystemEntityError("Role", name, operation)
        return role

    async def _require_user(self, user_id: str) -> None:
        if await self.identity_provider.get_user_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

    async def _validate_child_roles(
        self,
        name: str,
        composite: bool,
        child_roles: Optional[List[str]],
    ) -> List[str]:
        children: List[str] = []
        for child in child_roles or []:
            if child not in children:
                children.append(child)
        if not children:
            return []
        if not composite:
            raise InvalidArgumentError(
                f"Role '{name}' must be composite to have child roles",
                details={"role": name},
            )
        if name in children:
            raise InvalidArgumentError(f"Role '{name}' cannot be its own child", details={"role": name})
        for child in children:
            if await self.identity_provider.get_role_by_name(child) is None:
                raise InvalidArgumentError(
                    f"Child role '{child}' does not exist",
                    details={"role": name, "child_role": child},
                )
        return children

    @staticmethod
    def _check_custom_attributes(attributes: Optional[Dict[str, str]]) -> None:
        reserved = sorted(set(attributes or {}) & set(AttributeKeys.ROLE_RESERVED))
        if reserved:
            raise InvalidFormatError(
                f"Attribute keys are reserved: {', '.join(reserved)}",
                details={"reserved": reserved},
            )
