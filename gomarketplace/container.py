from __future__ import annotations

from gomarketplace.core.config import Settings
from gomarketplace.infrastructure.key_value_store import build_key_value_store
from gomarketplace.infrastructure.persistence_clients import MongoClientManager, RedisClientManager

settings = Settings.from_env()
mongo_manager = MongoClientManager(
    uri=settings.mongodb_uri,
    enabled=settings.enable_external_services and settings.storage_backend == "mongodb",
    timeout_seconds=settings.storage_timeout_seconds,
)
redis_manager = RedisClientManager(
    url=settings.redis_url,
    enabled=settings.enable_external_services and settings.storage_backend == "redis",
    timeout_seconds=settings.storage_timeout_seconds,
)
mongo_manager.connect()
redis_manager.connect()
key_value_store = build_key_value_store(
    settings,
    mongo_manager=mongo_manager,
    redis_manager=redis_manager,
)
