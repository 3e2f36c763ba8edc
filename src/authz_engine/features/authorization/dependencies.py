"""FastAPI authorization dependencies.

The request pipeline authenticates the caller and stores a Principal on
``request.state.principal``; these dependencies only decide whether that
principal may proceed.
"""

import logging
from typing import Any, Optional

from fastapi import HTTPException, Request, status

from ...core.exceptions import ForbiddenError
from .entities import Principal
from .services import AuthorizationGuard

logger = logging.getLogger(__name__)


class AuthorizationDependencyError(HTTPException):
    """403 raised by authorization dependencies."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def get_principal(request: Request) -> Optional[Principal]:
    """Read the principal set by the request pipeline.

    Accepts a Principal or a mapping carrying ``user_id`` (or ``sub``).
    """
    principal: Any = getattr(request.state, "principal", None)
    if principal is None or isinstance(principal, Principal):
        return principal
    if isinstance(principal, dict):
        user_id = principal.get("user_id") or principal.get("sub")
        if user_id:
            return Principal(user_id=str(user_id), username=principal.get("username", ""))
    logger.warning(f"Ignoring unsupported principal of type {type(principal).__name__}")
    return None


class AuthorizationDependencies:
    """Factory of FastAPI dependencies bound to one guard."""

    def __init__(self, guard: AuthorizationGuard):
        self.guard = guard

    def require_permissions(self, *permissions: str):
        """Require every permission in ``permissions``; returns the principal."""
        required = list(permissions)

        async def dependency(request: Request) -> Optional[Principal]:
            principal = get_principal(request)
            try:
                await self.guard.authorize(principal, required)
            except ForbiddenError as e:
                raise AuthorizationDependencyError(e.message)
            return principal

        return dependency


def require_permissions(*permissions: str):
    """Dependency using the engine stored on ``app.state.authz_engine``."""
    required = list(permissions)

    async def dependency(request: Request) -> Optional[Principal]:
        engine = getattr(request.app.state, "authz_engine", None)
        if engine is None:
            logger.error("Authorization engine is not attached to app.state.authz_engine")
            raise AuthorizationDependencyError("Access denied")
        return await engine.dependencies.require_permissions(*required)(request)

    return dependency
