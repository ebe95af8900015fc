from __future__ import annotations

import os
from dataclasses import dataclass

STORAGE_BACKENDS = ("memory", "redis", "mongodb")


@dataclass(frozen=True)
class Settings:
    app_name: str = "GoMarketplace Cart"
    api_prefix: str = "/v1"
    cart_storage_key: str = "@GoMarketplace:products"
    storage_backend: str = "memory"
    enable_external_services: bool = False
    redis_url: str = "redis://localhost:6379/0"
    mongodb_uri: str = "mongodb://localhost:27017/gomarketplace"
    mongodb_collection: str = "key_value"
    storage_timeout_seconds: float = 2.0
    log_level: str = "INFO"

    @property
    def uses_external_storage(self) -> bool:
        return self.enable_external_services and self.storage_backend != "memory"

    @classmethod
    def from_env(cls) -> "Settings":
        backend = str(os.getenv("STORAGE_BACKEND", cls.storage_backend)).strip().lower()
        if backend not in STORAGE_BACKENDS:
            backend = cls.storage_backend
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            api_prefix=os.getenv("API_PREFIX", cls.api_prefix),
            cart_storage_key=os.getenv("CART_STORAGE_KEY", cls.cart_storage_key),
            storage_backend=backend,
            enable_external_services=os.getenv("ENABLE_EXTERNAL_SERVICES", "false").lower()
            in {"1", "true", "yes"},
            redis_url=os.getenv("REDIS_URL", cls.redis_url),
            mongodb_uri=os.getenv("MONGODB_URI", cls.mongodb_uri),
            mongodb_collection=os.getenv("MONGODB_COLLECTION", cls.mongodb_collection),
            storage_timeout_seconds=max(
                0.1,
                float(
                    os.getenv(
                        "STORAGE_TIMEOUT_SECONDS",
                        str(cls.storage_timeout_seconds),
                    )
                ),
            ),
            log_level=str(os.getenv("LOG_LEVEL", cls.log_level)).strip().upper() or cls.log_level,
        )
