"""Composition root for the authorization engine.

Wires the catalog store, identity provider, catalog sync and every
service from settings, and owns the startup sequence:

1. connect the catalog store and ensure its schema
2. seed and load the permission catalog (in-memory fallback on store failure)
3. seed and load the resource registry
4. optionally seed the system roles in the identity provider
5. start listening for catalog changes from other instances
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .config.settings import AuthzSettings, get_settings
from .core.exceptions import CatalogStoreError
from .database import CatalogDatabase
from .features.authorization import (
    AuthorizationDependencies,
    AuthorizationGuard,
    EffectivePermissionResolver,
)
from .features.catalog_sync import (
    KIND_PERMISSION,
    KIND_RESOURCE,
    CatalogChange,
    CatalogChangeNotifier,
    NullCatalogNotifier,
    RedisCatalogNotifier,
)
from .features.identity import AttributeUpdater, IdentityProvider
from .features.permissions import AsyncPGPermissionRepository, PermissionCatalog, PermissionRepository
from .features.resources import AsyncPGResourceRepository, ResourceRegistry, ResourceRepository
from .features.roles import RoleStore
from .integrations.keycloak import KeycloakIdentityProvider

logger = logging.getLogger(__name__)


class AuthorizationEngine:
    """Builds and runs the authorization services.

    Collaborators can be injected (tests, alternative providers); anything
    left out is built from settings.
    """

    def __init__(
        self,
        settings: Optional[AuthzSettings] = None,
        identity_provider: Optional[IdentityProvider] = None,
        database: Optional[CatalogDatabase] = None,
        resource_repository: Optional[ResourceRepository] = None,
        permission_repository: Optional[PermissionRepository] = None,
        notifier: Optional[CatalogChangeNotifier] = None,
    ):
        self.settings = settings or get_settings()

        if database is None and (resource_repository is None or permission_repository is None):
            database = CatalogDatabase(
                self.settings.database_url,
                app_name=self.settings.app_name,
                min_size=self.settings.db_pool_min_size,
                max_size=self.settings.db_pool_max_size,
            )
        self.database = database

        self.identity_provider = identity_provider or KeycloakIdentityProvider.from_settings(self.settings)
        self.notifier = notifier or self._build_notifier(self.settings)

        self.attribute_updater = AttributeUpdater(
            self.identity_provider,
            max_attempts=self.settings.attribute_write_retries,
        )
        self.permissions = PermissionCatalog(
            permission_repository or AsyncPGPermissionRepository(database),
            self.identity_provider,
            self.notifier,
        )
        self.resources = ResourceRegistry(
            resource_repository or AsyncPGResourceRepository(database),
            self.permissions,
            self.notifier,
        )
        self.roles = RoleStore(
            self.identity_provider,
            self.permissions,
            self.attribute_updater,
            strict_permissions=self.settings.strict_role_permissions,
        )
        self.resolver = EffectivePermissionResolver(
            self.identity_provider,
            self.roles,
            self.permissions,
            self.attribute_updater,
        )
        self.guard = AuthorizationGuard(self.resolver)
        self.dependencies = AuthorizationDependencies(self.guard)
        self.started = False

    @staticmethod
    def _build_notifier(settings: AuthzSettings) -> CatalogChangeNotifier:
        if settings.catalog_sync_enabled:
            return RedisCatalogNotifier.from_url(settings.redis_url, settings.catalog_sync_channel)
        return NullCatalogNotifier()

    async def start(self) -> None:
        if self.started:
            return

        if self.database is not None:
            try:
                await self.database.connect()
                await self.database.ensure_schema()
            except CatalogStoreError as e:
                logger.error(f"Catalog store unavailable at startup: {e}")

        await self.permissions.initialize()
        await self.resources.initialize()

        if self.settings.seed_system_roles:
            created = await self.roles.initialize_system_roles()
            logger.info(f"System roles initialized ({created} created)")

        await self.notifier.start(self._apply_remote_change)
        self.started = True
        logger.info(f"Authorization engine started for {self.settings.app_name} ({self.settings.environment})")

    async def stop(self) -> None:
        if not self.started:
            return
        await self.notifier.stop()
        if self.database is not None:
            await self.database.close()
        self.started = False
        logger.info("Authorization engine stopped")

    async def _apply_remote_change(self, change: CatalogChange) -> None:
        logger.info(f"Catalog change from instance {change.instance_id}: {change.kind} {change.name} {change.action}")
        if change.kind == KIND_RESOURCE:
            await self.resources.reload()
        elif change.kind == KIND_PERMISSION:
            await self.permissions.reload()
        else:
            logger.warning(f"Unknown catalog change kind: {change.kind}")

    @asynccontextmanager
    async def lifespan(self, app: FastAPI):
        """FastAPI lifespan: ``FastAPI(lifespan=engine.lifespan)``."""
        app.state.authz_engine = self
        await self.start()
        try:
            yield
        finally:
            await self.stop()
