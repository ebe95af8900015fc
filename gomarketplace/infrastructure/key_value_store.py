from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from gomarketplace.core.config import Settings
from gomarketplace.core.errors import StorageUnavailableError
from gomarketplace.infrastructure.persistence_clients import MongoClientManager, RedisClientManager

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    name: str

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    @property
    def status(self) -> str: ...

    @property
    def error(self) -> str | None: ...


class InMemoryKeyValueStore:
    name = "memory"

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.values[key] = value

    @property
    def status(self) -> str:
        return "connected"

    @property
    def error(self) -> str | None:
        return None


class RedisKeyValueStore:
    name = "redis"

    def __init__(self, *, redis_manager: RedisClientManager) -> None:
        self.redis_manager = redis_manager

    async def get(self, key: str) -> str | None:
        value = await asyncio.to_thread(self._client().get, key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._client().set, key, value)

    def _client(self) -> Any:
        client = self.redis_manager.client
        if client is None:
            raise StorageUnavailableError(f"Redis is {self.redis_manager.status}")
        return client

    @property
    def status(self) -> str:
        return self.redis_manager.status

    @property
    def error(self) -> str | None:
        return self.redis_manager.error


class MongoKeyValueStore:
    name = "mongodb"

    def __init__(self, *, mongo_manager: MongoClientManager, collection_name: str = "key_value") -> None:
        self.mongo_manager = mongo_manager
        self.collection_name = collection_name

    async def get(self, key: str) -> str | None:
        payload = await asyncio.to_thread(self._collection().find_one, {"_id": key})
        if not payload:
            return None
        value = payload.get("value")
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        collection = self._collection()
        await asyncio.to_thread(
            collection.update_one,
            {"_id": key},
            {"$set": {"value": value, "updatedAt": datetime.now(timezone.utc).isoformat()}},
            upsert=True,
        )

    def _collection(self) -> Any:
        collection = self.mongo_manager.collection(self.collection_name)
        if collection is None:
            raise StorageUnavailableError(f"MongoDB is {self.mongo_manager.status}")
        return collection

    @property
    def status(self) -> str:
        return self.mongo_manager.status

    @property
    def error(self) -> str | None:
        return self.mongo_manager.error


def build_key_value_store(
    settings: Settings,
    *,
    mongo_manager: MongoClientManager,
    redis_manager: RedisClientManager,
) -> KeyValueStore:
    if not settings.uses_external_storage:
        return InMemoryKeyValueStore()

    if settings.storage_backend == "redis":
        if redis_manager.status == "connected":
            return RedisKeyValueStore(redis_manager=redis_manager)
        manager_status, manager_error = redis_manager.status, redis_manager.error
    else:
        if mongo_manager.status == "connected":
            return MongoKeyValueStore(
                mongo_manager=mongo_manager,
                collection_name=settings.mongodb_collection,
            )
        manager_status, manager_error = mongo_manager.status, mongo_manager.error

    logger.warning(
        "Storage backend %s is %s (%s); cart will not survive restarts",
        settings.storage_backend,
        manager_status,
        manager_error or "no error recorded",
    )
    return InMemoryKeyValueStore()
