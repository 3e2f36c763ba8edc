"""
Catalog store connection management using asyncpg.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import asyncpg
from asyncpg import Pool

from ..core.exceptions import CatalogStoreError, ConfigurationError
from .schema import CATALOG_SCHEMA_DDL

logger = logging.getLogger(__name__)

# Driver failures re-raised as CatalogStoreError; InterfaceError covers a closed pool or connection
DRIVER_ERRORS = (OSError, asyncpg.PostgresError, asyncpg.InterfaceError)


class CatalogDatabase:
    """Owns the asyncpg pool used by the resource and permission repositories."""

    def __init__(self, database_url: str, app_name: str = "authz-engine", **pool_config):
        """Initialize CatalogDatabase.

        Args:
            database_url: PostgreSQL DSN (a ``+asyncpg`` driver suffix is stripped)
            app_name: Reported to PostgreSQL as ``application_name``
            **pool_config: Additional pool configuration options
        """
        if not database_url:
            raise ConfigurationError("DATABASE_URL must be set for the catalog store")

        self.pool: Optional[Pool] = None
        self.dsn = database_url.replace("+asyncpg", "")
        self.app_name = app_name
        self.pool_config = {
            "min_size": 1,
            "max_size": 10,
            "command_timeout": 30,
            **pool_config,
        }

    async def connect(self) -> Pool:
        """Create the connection pool if it does not exist yet."""
        if self.pool is None:
            logger.info(f"Creating catalog store pool with size {self.pool_config['max_size']}")
            try:
                self.pool = await asyncpg.create_pool(
                    self.dsn,
                    server_settings={"application_name": self.app_name},
                    **self.pool_config,
                )
            except DRIVER_ERRORS as e:
                logger.error(f"Failed to connect to catalog store: {e}")
                raise CatalogStoreError(f"Failed to connect to catalog store: {e}")
            logger.info("Catalog store pool created")
        return self.pool

    async def close(self) -> None:
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Catalog store pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection from the pool."""
        if not self.pool:
            await self.connect()

        async with self.pool.acquire() as connection:
            yield connection

    async def ensure_schema(self) -> None:
        """Create the catalog tables when they are missing."""
        try:
            async with self.acquire() as connection:
                await connection.execute(CATALOG_SCHEMA_DDL)
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to create catalog schema: {e}")
            raise CatalogStoreError(f"Failed to create catalog schema: {e}")
        logger.info("Catalog schema ensured")

    async def health_check(self) -> bool:
        try:
            async with self.acquire() as connection:
                return await connection.fetchval("SELECT 1") == 1
        except Exception as e:
            logger.error(f"Catalog store health check failed: {e}")
            return False
