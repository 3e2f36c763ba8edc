"""Request-time authorization guard.

Every failure collapses to ForbiddenError so that unauthorized callers
learn nothing about the catalog or the identity provider.
"""

import logging
from typing import Optional, Sequence

from ....core.exceptions import ForbiddenError
from ..entities import Principal
from .permission_resolver import EffectivePermissionResolver

logger = logging.getLogger(__name__)


class AuthorizationGuard:
    """Stateless enforcement point: all required permissions must hold."""

    def __init__(self, resolver: EffectivePermissionResolver):
        self.resolver = resolver

    async def authorize(self, principal: Optional[Principal], required: Sequence[str]) -> None:
        """Raise ForbiddenError unless ``principal`` holds every permission in ``required``."""
        if not required:
            return

        if principal is None:
            logger.warning(f"Unauthenticated request denied; required permissions: {', '.join(required)}")
            raise ForbiddenError("Not authenticated")

        try:
            effective = await self.resolver.get_user_permissions(principal.user_id)
        except Exception as e:
            logger.error(f"Permission resolution failed for user {principal.user_id}: {e}")
            raise ForbiddenError("Access denied")

        for permission in required:
            if permission not in effective:
                logger.warning(f"User {principal.user_id} lacks permission: {permission}")
                raise ForbiddenError(
                    f"Permission required: {permission}",
                    details={"permission": permission},
                )

    async def is_authorized(self, principal: Optional[Principal], required: Sequence[str]) -> bool:
        try:
            await self.authorize(principal, required)
        except ForbiddenError:
            return False
        return True
