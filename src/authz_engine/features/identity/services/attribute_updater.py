"""Versioned read-modify-write of identity provider attribute bags.

The provider offers no compare-and-swap, so each write is guarded by an
``authzVersion`` attribute: the bag is read and mutated, the version is
re-read just before writing, and the write goes ahead with ``version + 1``
only when nobody else bumped it in between. A lost race retries from a
fresh read.
"""

import logging
from typing import Callable, Optional, Tuple

from ....core.exceptions import ConcurrentModificationError, RoleNotFoundError, UserNotFoundError
from ..entities import IdentityProvider, RoleAttributeBag, RoleRecord, UserAttributeBag, UserRecord

logger = logging.getLogger(__name__)

RoleMutation = Callable[[RoleRecord, RoleAttributeBag], None]
UserMutation = Callable[[UserRecord, UserAttributeBag], None]


class AttributeUpdater:
    """Applies mutations to role and user attribute bags with a version check."""

    def __init__(self, provider: IdentityProvider, max_attempts: int = 3):
        self._provider = provider
        self._max_attempts = max(1, max_attempts)

    async def update_role(
        self,
        name: str,
        mutate: RoleMutation,
        description: Optional[str] = None,
        composite: Optional[bool] = None,
    ) -> Tuple[RoleRecord, RoleAttributeBag]:
        """Apply ``mutate`` to the role's decoded bag and persist it.

        ``mutate`` edits the bag in place and may raise to abort; it is called
        again from scratch after a lost race.
        """
        for attempt in range(1, self._max_attempts + 1):
            role = await self._require_role(name)
            bag = RoleAttributeBag.decode(role.attributes)
            expected_version = bag.version
            mutate(role, bag)

            current = await self._require_role(name)
            if RoleAttributeBag.decode(current.attributes).version != expected_version:
                logger.warning(f"Role '{name}' attributes changed concurrently (attempt {attempt}/{self._max_attempts})")
                continue

            bag.version = expected_version + 1
            attributes = bag.encode()
            # The provider overwrites the description on every role update
            kept_description = description if description is not None else current.description
            await self._provider.update_role(name, attributes, description=kept_description, composite=composite)
            role.attributes = attributes
            role.description = kept_description
            if composite is not None:
                role.composite = composite
            return role, bag

        raise ConcurrentModificationError(
            f"Role '{name}' was modified concurrently; gave up after {self._max_attempts} attempts",
            details={"role": name},
        )

    async def update_user(self, user_id: str, mutate: UserMutation) -> Tuple[UserRecord, UserAttributeBag]:
        """Apply ``mutate`` to the user's decoded bag and persist it."""
        for attempt in range(1, self._max_attempts + 1):
            user = await self._require_user(user_id)
            bag = UserAttributeBag.decode(user.attributes)
            expected_version = bag.version
            mutate(user, bag)

            current = await self._require_user(user_id)
            if UserAttributeBag.decode(current.attributes).version != expected_version:
                logger.warning(f"User '{user_id}' attributes changed concurrently (attempt {attempt}/{self._max_attempts})")
                continue

            bag.version = expected_version + 1
            attributes = bag.encode()
            await self._provider.update_user(user_id, attributes)
            user.attributes = attributes
            return user, bag

        raise ConcurrentModificationError(
            f"User '{user_id}' was modified concurrently; gave up after {self._max_attempts} attempts",
            details={"user_id": user_id},
        )

    async def _require_role(self, name: str) -> RoleRecord:
        role = await self._provider.get_role_by_name(name)
        if role is None:
            raise RoleNotFoundError(name)
        return role

    async def _require_user(self, user_id: str) -> UserRecord:
        user = await self._provider.get_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
