"""Tests for role management on top of the identity provider."""

import pytest

from authz_engine.core.exceptions import (
    DuplicateEntityError,
    IdentityProviderError,
    InvalidArgumentError,
    InvalidFormatError,
    PermissionNotFoundError,
    ReferenceInUseError,
    RoleNotFoundError,
    SystemEntityError,
    UnknownPermissionError,
    UserNotFoundError,
)
from authz_engine.config.constants import SYSTEM_ROLE_DEFINITIONS
from authz_engine.features.roles import RolePatch, RoleStore


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_role_with_permissions(self, role_store, identity_provider):
        role = await role_store.create(
            "editor",
            "Edits documents",
            permissions=["documents:read", "documents:update", "documents:read"],
            attributes={"department": "content"},
        )

        assert role.permissions == ["documents:read", "documents:update"]
        assert role.attributes == {"department": "content"}
        stored = identity_provider.roles["editor"].attributes
        assert stored["permissions"] == ["documents:read", "documents:update"]
        assert stored["department"] == ["content"]

        fetched = await role_store.get_role("editor")
        assert fetched.permissions == ["documents:read", "documents:update"]
        assert fetched.description == "Edits documents"

    @pytest.mark.asyncio
    async def test_duplicate_role(self, role_store, identity_provider):
        identity_provider.add_role("editor")
        with pytest.raises(DuplicateEntityError):
            await role_store.create("editor")

    @pytest.mark.asyncio
    async def test_invalid_role_name(self, role_store):
        with pytest.raises(InvalidFormatError):
            await role_store.create("content editor")

    @pytest.mark.asyncio
    async def test_unknown_permission_in_strict_mode(self, role_store, identity_provider):
        with pytest.raises(UnknownPermissionError):
            await role_store.create("editor", permissions=["ghosts:haunt"])
        assert "editor" not in identity_provider.roles

    @pytest.mark.asyncio
    async def test_unknown_permission_allowed_when_not_strict(self, identity_provider, permission_catalog):
        store = RoleStore(identity_provider, permission_catalog, strict_permissions=False)
        role = await store.create("editor", permissions=["ghosts:haunt"])
        assert role.permissions == ["ghosts:haunt"]

    @pytest.mark.asyncio
    async def test_reserved_attribute_keys_rejected(self, role_store):
        with pytest.raises(InvalidFormatError):
            await role_store.create("editor", attributes={"permissions": "users:read"})

    @pytest.mark.asyncio
    async def test_composite_role_links_children(self, role_store, identity_provider):
        identity_provider.add_role("viewer", permissions=["documents:read"])

        role = await role_store.create("editor", composite=True, child_roles=["viewer"])

        assert role.child_roles == ["viewer"]
        assert identity_provider.composites["editor"] == ["viewer"]
        fetched = await role_store.get_role("editor")
        assert fetched.composite
        assert fetched.child_roles == ["viewer"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "composite, children",
        [(False, ["viewer"]), (True, ["editor"]), (True, ["ghost"])],
    )
    async def test_child_role_validation(self, role_store, identity_provider, composite, children):
        identity_provider.add_role("viewer")
        with pytest.raises(InvalidArgumentError):
            await role_store.create("editor", composite=composite, child_roles=children)
        assert "editor" not in identity_provider.roles


class TestUpdate:
    @pytest.mark.asyncio
    async def test_permissions_replaced_and_attributes_merged(self, role_store):
        await role_store.create("editor", permissions=["documents:read"], attributes={"department": "content"})

        role = await role_store.update(
            "editor",
            RolePatch(
                description="Content editors",
                permissions=["documents:update"],
                attributes={"level": "senior"},
            ),
        )

        assert role.description == "Content editors"
        assert role.permissions == ["documents:update"]
        assert role.attributes == {"department": "content", "level": "senior"}

    @pytest.mark.asyncio
    async def test_child_roles_applied_as_delta(self, role_store, identity_provider):
        identity_provider.add_role("viewer")
        identity_provider.add_role("commenter")
        await role_store.create("editor", composite=True, child_roles=["viewer"])

        role = await role_store.update("editor", RolePatch(child_roles=["commenter"]))

        assert role.child_roles == ["commenter"]
        assert identity_provider.composites["editor"] == ["commenter"]

    @pytest.mark.asyncio
    async def test_unknown_permission_rejected(self, role_store):
        await role_store.create("editor")
        with pytest.raises(UnknownPermissionError):
            await role_store.update("editor", RolePatch(permissions=["ghosts:haunt"]))

    @pytest.mark.asyncio
    async def test_system_role_is_immutable(self, role_store, identity_provider):
        identity_provider.add_role("admin", permissions=["users:read"])
        with pytest.raises(SystemEntityError):
            await role_store.update("admin", RolePatch(description="x"))

    @pytest.mark.asyncio
    async def test_missing_role(self, role_store):
        with pytest.raises(RoleNotFoundError):
            await role_store.update("ghost", RolePatch(description="x"))


class TestPermissions:
    @pytest.mark.asyncio
    async def test_add_permissions_merges_without_duplicates(self, role_store):
        await role_store.create("editor", permissions=["documents:read"])

        role = await role_store.add_permissions("editor", ["documents:read", "documents:update"])

        assert role.permissions == ["documents:read", "documents:update"]
        assert await role_store.get_role_permissions("editor") == ["documents:read", "documents:update"]

    @pytest.mark.asyncio
    async def test_add_unknown_permission(self, role_store):
        await role_store.create("editor")
        with pytest.raises(UnknownPermissionError):
            await role_store.add_permissions("editor", ["ghosts:haunt"])

    @pytest.mark.asyncio
    async def test_remove_permission(self, role_store):
        await role_store.create("editor", permissions=["documents:read", "documents:update"])

        role = await role_store.remove_permission("editor", "documents:read")

        assert role.permissions == ["documents:update"]

    @pytest.mark.asyncio
    async def test_permission_changes_keep_description(self, role_store, identity_provider):
        await role_store.create("editor", "Edits documents", permissions=["documents:read"])

        await role_store.add_permissions("editor", ["documents:update"])
        await role_store.remove_permission("editor", "documents:read")

        assert identity_provider.role_updates == [("editor", "Edits documents"), ("editor", "Edits documents")]
        assert (await role_store.get_role("editor")).description == "Edits documents"

    @pytest.mark.asyncio
    async def test_remove_permission_not_on_role(self, role_store):
        await role_store.create("editor", permissions=["documents:read"])
        with pytest.raises(PermissionNotFoundError):
            await role_store.remove_permission("editor", "documents:update")


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_role(self, role_store, identity_provider):
        await role_store.create("editor")
        await role_store.delete("editor")
        assert "editor" not in identity_provider.roles

    @pytest.mark.asyncio
    async def test_delete_blocked_while_users_hold_role(self, role_store, identity_provider):
        await role_store.create("editor")
        identity_provider.add_user("u-1", roles=["editor"])

        with pytest.raises(ReferenceInUseError) as exc_info:
            await role_store.delete("editor")
        assert exc_info.value.details["users"] == ["u-1"]

    @pytest.mark.asyncio
    async def test_system_role_cannot_be_deleted(self, role_store, identity_provider):
        identity_provider.add_role("user")
        with pytest.raises(SystemEntityError):
            await role_store.delete("user")

    @pytest.mark.asyncio
    async def test_missing_role(self, role_store):
        with pytest.raises(RoleNotFoundError):
            await role_store.delete("ghost")


class TestUserRoles:
    @pytest.mark.asyncio
    async def test_assign_and_remove(self, role_store, identity_provider):
        identity_provider.add_user("u-1")
        await role_store.create("editor")

        assert await role_store.assign_roles_to_user("u-1", ["editor"]) == ["editor"]
        assert await role_store.user_has_role("u-1", "editor")

        await role_store.remove_roles_from_user("u-1", ["editor"])
        assert await role_store.get_user_roles("u-1") == []

    @pytest.mark.asyncio
    async def test_assign_to_unknown_user(self, role_store):
        with pytest.raises(UserNotFoundError):
            await role_store.assign_roles_to_user("ghost", ["user"])

    @pytest.mark.asyncio
    async def test_assign_unknown_role(self, role_store, identity_provider):
        identity_provider.add_user("u-1")
        with pytest.raises(InvalidArgumentError):
            await role_store.assign_roles_to_user("u-1", ["ghost"])
        assert identity_provider.user_roles["u-1"] == []

    @pytest.mark.asyncio
    async def test_listing_degrades_on_provider_failure(self, role_store, identity_provider, provider_error):
        identity_provider.failures["list_roles"] = provider_error
        identity_provider.failures["get_user_roles"] = provider_error

        assert await role_store.list_roles() == []
        assert await role_store.get_user_roles("u-1") == []


class TestSystemRoles:
    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, role_store, identity_provider):
        assert await role_store.initialize_system_roles() == len(SYSTEM_ROLE_DEFINITIONS)
        assert await role_store.initialize_system_roles() == 0

        roles = await role_store.list_roles()
        assert {role.name for role in roles} == set(SYSTEM_ROLE_DEFINITIONS)
        guest = await role_store.get_role("guest")
        assert guest.permissions == ["services:read"]
        assert guest.is_system

    @pytest.mark.asyncio
    async def test_failures_are_logged_and_skipped(self, role_store, identity_provider):
        identity_provider.failures["create_role"] = IdentityProviderError("down")
        assert await role_store.initialize_system_roles() == 0
