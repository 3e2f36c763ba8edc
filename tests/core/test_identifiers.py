"""Tests for catalog name validation and the PermissionName value object."""

import pytest

from authz_engine.core.exceptions import InvalidFormatError
from authz_engine.core.value_objects import (
    PermissionName,
    generate_permission_id,
    generate_resource_id,
    is_valid_permission_name,
    validate_actions,
    validate_permission_names,
    validate_resource_name,
    validate_role_name,
    validate_scope,
)


class TestPermissionNamePattern:
    @pytest.mark.parametrize("name", ["documents:read", "documents:read:own", "user_profiles:bulk_export:team"])
    def test_valid_names(self, name):
        assert is_valid_permission_name(name)

    @pytest.mark.parametrize(
        "name",
        ["documents", "Documents:read", "documents:read:own:extra", "documents:", ":read", "doc-s:read", "docs:read1", ""],
    )
    def test_invalid_names(self, name):
        assert not is_valid_permission_name(name)

    def test_parse_with_scope(self):
        parsed = PermissionName.parse("documents:read:own")
        assert (parsed.resource, parsed.action, parsed.scope) == ("documents", "read", "own")
        assert str(parsed) == "documents:read:own"

    def test_parse_without_scope(self):
        parsed = PermissionName.parse("documents:read")
        assert parsed.scope is None
        assert parsed.value == "documents:read"

    def test_parse_rejects_bad_name(self):
        with pytest.raises(InvalidFormatError):
            PermissionName.parse("documents")

    def test_constructor_validates_parts(self):
        with pytest.raises(InvalidFormatError):
            PermissionName("documents", "Read")


class TestNameValidators:
    def test_resource_name(self):
        assert validate_resource_name("user_profiles") == "user_profiles"
        with pytest.raises(InvalidFormatError):
            validate_resource_name("UserProfiles")

    def test_scope_none_is_allowed(self):
        assert validate_scope(None) is None
        with pytest.raises(InvalidFormatError):
            validate_scope("own-team")

    def test_actions_keep_order(self):
        assert validate_actions(["read", "create", "bulk_delete"]) == ["read", "create", "bulk_delete"]

    def test_actions_must_not_be_empty(self):
        with pytest.raises(InvalidFormatError):
            validate_actions([])

    def test_actions_reject_duplicates(self):
        with pytest.raises(InvalidFormatError) as exc_info:
            validate_actions(["read", "read"])
        assert exc_info.value.details["value"] == "read"

    def test_actions_reject_bad_action(self):
        with pytest.raises(InvalidFormatError):
            validate_actions(["read", "Write"])

    def test_role_name(self):
        assert validate_role_name("Tenant-Admin_2") == "Tenant-Admin_2"
        with pytest.raises(InvalidFormatError):
            validate_role_name("tenant admin")

    def test_permission_names_are_deduplicated(self):
        assert validate_permission_names(["a:b", "c:d", "a:b"]) == ["a:b", "c:d"]

    def test_permission_names_reject_invalid(self):
        with pytest.raises(InvalidFormatError):
            validate_permission_names(["a:b", "nope"])


def test_generated_ids_are_prefixed_and_unique():
    assert generate_resource_id().startswith("res_")
    assert generate_permission_id().startswith("perm_")
    assert generate_permission_id() != generate_permission_id()


class TestTrailingNewline:
    @pytest.mark.parametrize("name", ["documents:approve\n", "documents:read:own\n"])
    def test_permission_name_rejected(self, name):
        assert not is_valid_permission_name(name)
        with pytest.raises(InvalidFormatError):
            PermissionName.parse(name)

    @pytest.mark.parametrize(
        "validator",
        [validate_resource_name, validate_scope, validate_role_name],
    )
    def test_single_names_rejected(self, validator):
        with pytest.raises(InvalidFormatError):
            validator("documents\n")

    def test_actions_rejected(self):
        with pytest.raises(InvalidFormatError):
            validate_actions(["read", "approve\n"])

    def test_grant_lists_rejected(self):
        with pytest.raises(InvalidFormatError):
            validate_permission_names(["documents:read", "documents:approve\n"])
