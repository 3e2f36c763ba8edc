"""Keycloak implementation of the IdentityProvider protocol.

Uses the python-keycloak async admin API against a single realm with
client credentials. A 404 on a single-entity read becomes ``None``; every
other Keycloak failure is raised as IdentityProviderError.
"""

import logging
from typing import Any, Dict, List, Optional

from keycloak import KeycloakAdmin, KeycloakOpenIDConnection
from keycloak.exceptions import KeycloakError

from ...config.settings import AuthzSettings
from ...core.exceptions import ConfigurationError, IdentityProviderError, RoleNotFoundError
from ...features.identity import Attributes, RoleRecord, UserRecord

logger = logging.getLogger(__name__)


def _is_not_found(error: KeycloakError) -> bool:
    return getattr(error, "response_code", None) == 404


def _normalize_attributes(raw: Optional[Dict[str, Any]]) -> Attributes:
    """Keycloak returns list values, but older servers may hand back scalars."""
    attributes: Attributes = {}
    for key, value in (raw or {}).items():
        if isinstance(value, list):
            attributes[key] = [str(item) for item in value]
        elif value is not None:
            attributes[key] = [str(value)]
    return attributes


class KeycloakIdentityProvider:
    """IdentityProvider backed by the Keycloak admin REST API."""

    def __init__(
        self,
        server_url: str,
        realm_name: str,
        client_id: str,
        client_secret: str,
        verify: bool = True,
        admin_client: Optional[KeycloakAdmin] = None,
    ):
        self.server_url = self._normalize_server_url(server_url)
        self.realm_name = realm_name
        self.client_id = client_id
        self.client_secret = client_secret
        self.verify = verify
        self._admin_client = admin_client

    @classmethod
    def from_settings(cls, settings: AuthzSettings) -> "KeycloakIdentityProvider":
        return cls(
            server_url=settings.keycloak_server_url,
            realm_name=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret.get_secret_value(),
            verify=settings.keycloak_verify_ssl,
        )

    @staticmethod
    def _normalize_server_url(server_url: str) -> str:
        """Drop a trailing ``/auth`` (not used by Keycloak 18+)."""
        server_url = server_url.rstrip("/")
        if server_url.endswith("/auth"):
            server_url = server_url[:-5]
            logger.info(f"Removed /auth suffix for Keycloak v18+ compatibility: {server_url}")
        return server_url

    def _ensure_connected(self) -> KeycloakAdmin:
        if self._admin_client is None:
            if not self.client_secret:
                raise ConfigurationError("KEYCLOAK_CLIENT_SECRET is required for the identity provider")
            connection = KeycloakOpenIDConnection(
                server_url=self.server_url,
                realm_name=self.realm_name,
                client_id=self.client_id,
                client_secret_key=self.client_secret,
                verify=self.verify,
            )
            self._admin_client = KeycloakAdmin(connection=connection)
            logger.info(f"Keycloak admin client configured for realm: {self.realm_name}")
        return self._admin_client

    def _fail(self, operation: str, error: KeycloakError) -> IdentityProviderError:
        logger.error(f"Keycloak {operation} failed: {error}")
        return IdentityProviderError(
            f"Identity provider {operation} failed: {error}",
            details={"operation": operation, "status": getattr(error, "response_code", None)},
        )

    # Roles

    async def get_role_by_name(self, name: str) -> Optional[RoleRecord]:
        admin = self._ensure_connected()
        try:
            role = await admin.a_get_realm_role(name)
            children = []
            if role.get("composite"):
                children = await admin.a_get_composite_realm_roles_of_role(name)
        except KeycloakError as e:
            if _is_not_found(e):
                return None
            raise self._fail(f"get role '{name}'", e) from e
        return self._build_role(role, children)

    async def list_roles(self) -> List[RoleRecord]:
        admin = self._ensure_connected()
        try:
            roles = await admin.a_get_realm_roles(brief_representation=False)
            records = []
            for role in roles:
                children = []
                if role.get("composite"):
                    children = await admin.a_get_composite_realm_roles_of_role(role["name"])
                records.append(self._build_role(role, children))
        except KeycloakError as e:
            raise self._fail("list roles", e) from e
        return records

    async def create_role(
        self,
        name: str,
        description: str,
        attributes: Attributes,
        composite: bool = False,
    ) -> RoleRecord:
        admin = self._ensure_connected()
        payload = {
            "name": name,
            "description": description,
            "composite": composite,
            "attributes": attributes,
        }
        try:
            await admin.a_create_realm_role(payload, skip_exists=False)
            role = await admin.a_get_realm_role(name)
        except KeycloakError as e:
            raise self._fail(f"create role '{name}'", e) from e
        logger.info(f"Created Keycloak role: {name}")
        return self._build_role(role, [])

    async def update_role(
        self,
        name: str,
        attributes: Attributes,
        description: Optional[str] = None,
        composite: Optional[bool] = None,
    ) -> None:
        """Replace the role's attributes.

        Keycloak overwrites the stored description with whatever the payload
        carries, so a ``None`` description is filled in from the current role.
        """
        admin = self._ensure_connected()
        payload: Dict[str, Any] = {"name": name, "attributes": attributes}
        if composite is not None:
            payload["composite"] = composite
        try:
            if description is None:
                current = await admin.a_get_realm_role(name)
                description = current.get("description") or ""
            payload["description"] = description
            await admin.a_update_realm_role(name, payload)
        except KeycloakError as e:
            if _is_not_found(e):
                raise RoleNotFoundError(name) from e
            raise self._fail(f"update role '{name}'", e) from e

    async def delete_role(self, name: str) -> None:
        admin = self._ensure_connected()
        try:
            await admin.a_delete_realm_role(name)
        except KeycloakError as e:
            if _is_not_found(e):
                raise RoleNotFoundError(name) from e
            raise self._fail(f"delete role '{name}'", e) from e
        logger.info(f"Deleted Keycloak role: {name}")

    async def add_composite_roles(self, name: str, child_names: List[str]) -> None:
        admin = self._ensure_connected()
        try:
            children = [await admin.a_get_realm_role(child) for child in child_names]
            await admin.a_add_composite_realm_roles_to_role(name, children)
        except KeycloakError as e:
            raise self._fail(f"add composite roles to '{name}'", e) from e

    async def remove_composite_roles(self, name: str, child_names: List[str]) -> None:
        admin = self._ensure_connected()
        try:
            children = [await admin.a_get_realm_role(child) for child in child_names]
            await admin.a_remove_composite_realm_roles_to_role(name, children)
        except KeycloakError as e:
            raise self._fail(f"remove composite roles from '{name}'", e) from e

    async def get_users_with_role(self, name: str) -> List[UserRecord]:
        admin = self._ensure_connected()
        try:
            users = await admin.a_get_realm_role_members(name)
        except KeycloakError as e:
            raise self._fail(f"get members of role '{name}'", e) from e
        return [self._build_user(user) for user in users]

    # Users

    async def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        admin = self._ensure_connected()
        try:
            user = await admin.a_get_user(user_id)
        except KeycloakError as e:
            if _is_not_found(e):
                return None
            raise self._fail(f"get user '{user_id}'", e) from e
        return self._build_user(user)

    async def update_user(self, user_id: str, attributes: Attributes) -> None:
        admin = self._ensure_connected()
        try:
            await admin.a_update_user(user_id, {"attributes": attributes})
        except KeycloakError as e:
            raise self._fail(f"update user '{user_id}'", e) from e

    async def get_user_roles(self, user_id: str) -> List[str]:
        admin = self._ensure_connected()
        try:
            roles = await admin.a_get_realm_roles_of_user(user_id)
        except KeycloakError as e:
            raise self._fail(f"get roles of user '{user_id}'", e) from e
        return [role["name"] for role in roles]

    async def assign_roles_to_user(self, user_id: str, role_names: List[str]) -> None:
        admin = self._ensure_connected()
        try:
            roles = [await admin.a_get_realm_role(name) for name in role_names]
            await admin.a_assign_realm_roles(user_id, roles)
        except KeycloakError as e:
            raise self._fail(f"assign roles to user '{user_id}'", e) from e

    async def remove_roles_from_user(self, user_id: str, role_names: List[str]) -> None:
        admin = self._ensure_connected()
        try:
            roles = [await admin.a_get_realm_role(name) for name in role_names]
            await admin.a_delete_realm_roles_of_user(user_id, roles)
        except KeycloakError as e:
            raise self._fail(f"remove roles from user '{user_id}'", e) from e

    # Mapping

    @staticmethod
    def _build_role(role: Dict[str, Any], children: List[Dict[str, Any]]) -> RoleRecord:
        return RoleRecord(
            id=role.get("id"),
            name=role["name"],
            description=role.get("description") or "",
            composite=bool(role.get("composite")),
            attributes=_normalize_attributes(role.get("attributes")),
            child_roles=[child["name"] for child in children],
        )

    @staticmethod
    def _build_user(user: Dict[str, Any]) -> UserRecord:
        return UserRecord(
            id=user["id"],
            username=user.get("username", ""),
            enabled=bool(user.get("enabled", True)),
            attributes=_normalize_attributes(user.get("attributes")),
        )
