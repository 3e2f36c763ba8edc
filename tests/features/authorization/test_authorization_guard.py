"""Tests for the request-time authorization guard."""

from unittest.mock import AsyncMock

import pytest

from authz_engine.core.exceptions import ForbiddenError, IdentityProviderError
from authz_engine.features.authorization import AuthorizationGuard, Principal


@pytest.fixture
def alice(identity_provider):
    identity_provider.add_role("reader", permissions=["documents:read"])
    identity_provider.add_user("alice", direct_permissions=["reports:read"], roles=["reader"])
    return Principal(user_id="alice", username="alice")


class TestAuthorizationGuard:
    @pytest.mark.asyncio
    async def test_all_required_permissions_held(self, guard, alice):
        await guard.authorize(alice, ["documents:read", "reports:read"])

    @pytest.mark.asyncio
    async def test_requirements_are_conjunctive(self, guard, alice):
        with pytest.raises(ForbiddenError) as exc_info:
            await guard.authorize(alice, ["documents:read", "documents:delete"])
        assert exc_info.value.message == "Permission required: documents:delete"

    @pytest.mark.asyncio
    async def test_no_requirements_always_allowed(self, guard):
        await guard.authorize(None, [])

    @pytest.mark.asyncio
    async def test_missing_principal(self, guard):
        with pytest.raises(ForbiddenError) as exc_info:
            await guard.authorize(None, ["documents:read"])
        assert exc_info.value.message == "Not authenticated"

    @pytest.mark.asyncio
    async def test_resolution_errors_become_forbidden(self, guard, alice, identity_provider):
        identity_provider.failures["get_user_by_id"] = IdentityProviderError("down")
        with pytest.raises(ForbiddenError) as exc_info:
            await guard.authorize(alice, ["documents:read"])
        assert exc_info.value.message == "Access denied"

    @pytest.mark.asyncio
    async def test_unknown_user_is_forbidden(self, guard):
        with pytest.raises(ForbiddenError):
            await guard.authorize(Principal(user_id="ghost"), ["documents:read"])

    @pytest.mark.asyncio
    async def test_resolves_once_per_check(self):
        resolver = AsyncMock()
        resolver.get_user_permissions.return_value = {"a:read", "b:read"}
        guard = AuthorizationGuard(resolver)

        await guard.authorize(Principal(user_id="u-1"), ["a:read", "b:read"])

        resolver.get_user_permissions.assert_awaited_once_with("u-1")

    @pytest.mark.asyncio
    async def test_is_authorized(self, guard, alice):
        assert await guard.is_authorized(alice, ["documents:read"])
        assert not await guard.is_authorized(alice, ["documents:delete"])
