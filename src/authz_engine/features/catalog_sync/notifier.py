"""Cross-instance catalog change notification.

Each engine instance keeps its resource and permission catalogs in memory.
Mutations are announced on a Redis pub/sub channel so that other
instances reload the affected catalog; an instance ignores its own
messages.
"""

import asyncio
import json
import logging
import uuid
from abc import abstractmethod
from dataclasses import asdict, dataclass
from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

KIND_RESOURCE = "resource"
KIND_PERMISSION = "permission"


@dataclass(frozen=True)
class CatalogChange:
    """A single catalog mutation announced to other instances."""

    instance_id: str
    kind: str
    action: str
    name: str

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, payload: str) -> "CatalogChange":
        data = json.loads(payload)
        return cls(
            instance_id=data["instance_id"],
            kind=data["kind"],
            action=data["action"],
            name=data["name"],
        )


ChangeHandler = Callable[[CatalogChange], Awaitable[None]]


@runtime_checkable
class CatalogChangeNotifier(Protocol):
    """Publishes catalog mutations and delivers remote ones to a handler."""

    @abstractmethod
    async def publish(self, kind: str, action: str, name: str) -> None:
        ...

    @abstractmethod
    async def start(self, handler: ChangeHandler) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...


class NullCatalogNotifier:
    """Notifier used for single-instance deployments."""

    async def publish(self, kind: str, action: str, name: str) -> None:
        return None

    async def start(self, handler: ChangeHandler) -> None:
        logger.info("Catalog sync disabled; catalogs are local to this instance")

    async def stop(self) -> None:
        return None


class RedisCatalogNotifier:
    """Redis pub/sub implementation of CatalogChangeNotifier."""

    def __init__(
        self,
        redis_client: aioredis.Redis,
        channel: str,
        instance_id: Optional[str] = None,
        reconnect_delay: float = 1.0,
        max_reconnect_delay: float = 30.0,
    ):
        self._redis = redis_client
        self._channel = channel
        self.instance_id = instance_id or uuid.uuid4().hex
        self.reconnect_delay = reconnect_delay
        self.max_reconnect_delay = max_reconnect_delay
        self._pubsub = None
        self._listener: Optional[asyncio.Task] = None

    @classmethod
    def from_url(cls, redis_url: str, channel: str) -> "RedisCatalogNotifier":
        return cls(aioredis.from_url(redis_url, decode_responses=True), channel)

    async def publish(self, kind: str, action: str, name: str) -> None:
        """Announce a change. Delivery is best effort."""
        change = CatalogChange(self.instance_id, kind, action, name)
        try:
            await self._redis.publish(self._channel, change.to_json())
            logger.debug(f"Published catalog change {kind}:{action}:{name}")
        except RedisError as e:
            logger.error(f"Failed to publish catalog change {kind}:{action}:{name}: {e}")

    async def start(self, handler: ChangeHandler) -> None:
        if self._listener is not None:
            return
        self._pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        await self._pubsub.subscribe(self._channel)
        self._listener = asyncio.create_task(self._listen(handler))
        logger.info(f"Catalog sync listening on channel '{self._channel}' as {self.instance_id}")

    async def stop(self) -> None:
        """Stop listening and close the connections, whatever state the listener is in."""
        try:
            if self._listener is not None:
                self._listener.cancel()
                try:
                    await self._listener
                except asyncio.CancelledError:
                    pass
                except Exception as e:
                    logger.error(f"Catalog sync listener had failed: {e}")
                finally:
                    self._listener = None

            if self._pubsub is not None:
                try:
                    await self._pubsub.unsubscribe(self._channel)
                except RedisError as e:
                    logger.warning(f"Failed to unsubscribe from '{self._channel}': {e}")
                finally:
                    await self._pubsub.aclose()
                    self._pubsub = None
        finally:
            await self._redis.aclose()
        logger.info("Catalog sync stopped")

    async def _listen(self, handler: ChangeHandler) -> None:
        """Deliver messages until cancelled, resubscribing after connection loss.

        Changes published while disconnected are lost, so every successful
        resubscribe is followed by a full resync of both catalogs.
        """
        delay = self.reconnect_delay
        while True:
            try:
                async for message in self._pubsub.listen():
                    delay = self.reconnect_delay
                    if message.get("type") != "message":
                        continue
                    await self.dispatch(message["data"], handler)
                return
            except RedisError as e:
                logger.error(f"Catalog sync connection lost: {e}; resubscribing in {delay:.1f}s")
            except Exception:
                logger.exception("Catalog sync listener crashed; cross-instance sync is stopped")
                raise

            await asyncio.sleep(delay)
            delay = min(delay * 2, self.max_reconnect_delay)
            try:
                await self._pubsub.subscribe(self._channel)
            except RedisError as e:
                logger.error(f"Catalog sync resubscribe to '{self._channel}' failed: {e}")
                continue

            logger.info(f"Catalog sync resubscribed to '{self._channel}'; resyncing catalogs")
            await self._resync(handler)

    async def _resync(self, handler: ChangeHandler) -> None:
        for kind in (KIND_RESOURCE, KIND_PERMISSION):
            change = CatalogChange(instance_id="", kind=kind, action="resync", name="*")
            try:
                await handler(change)
            except Exception as e:
                logger.error(f"Failed to resync {kind} catalog: {e}")

    async def dispatch(self, payload: str, handler: ChangeHandler) -> None:
        """Decode one message and hand it to ``handler`` unless it is our own."""
        try:
            change = CatalogChange.from_json(payload)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring malformed catalog change message: {e}")
            return

        if change.instance_id == self.instance_id:
            return

        try:
            await handler(change)
        except Exception as e:
            # Keep the listener alive; the next change triggers another reload
            logger.error(f"Failed to apply catalog change {change.kind}:{change.action}:{change.name}: {e}")
