from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class MongoClientManager:
    uri: str
    enabled: bool
    timeout_seconds: float = 2.0
    _client: Any = None
    _last_error: str | None = None

    def connect(self) -> None:
        if not self.enabled:
            return
        try:
            from pymongo import MongoClient

            timeout_ms = int(self.timeout_seconds * 1000)
            self._client = MongoClient(
                self.uri,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
            )
            self._client.admin.command("ping")
            self._last_error = None
        except Exception as exc:
            logger.warning("MongoDB unavailable at %s", self.uri, exc_info=exc)
            self._client = None
            self._last_error = str(exc)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None

    def collection(self, name: str, default_database: str = "gomarketplace") -> Any | None:
        client = self._client
        if client is None:
            return None
        database = client.get_default_database(default=default_database)
        return database[name]

    @property
    def status(self) -> str:
        if not self.enabled:
            return "disabled"
        if self._client is None:
            return "unavailable"
        return "connected"

    @property
    def error(self) -> str | None:
        return self._last_error

    @property
    def client(self) -> Any:
        return self._client


@dataclass
class RedisClientManager:
    url: str
    enabled: bool
    timeout_seconds: float = 2.0
    _client: Any = None
    _last_error: str | None = None

    def connect(self) -> None:
        if not self.enabled:
            return
        try:
            import redis

            self._client = redis.from_url(
                self.url,
                socket_timeout=self.timeout_seconds,
                socket_connect_timeout=self.timeout_seconds,
                decode_responses=True,
            )
            self._client.ping()
            self._last_error = None
        except Exception as exc:
            logger.warning("Redis unavailable at %s", self.url, exc_info=exc)
            self._client = None
            self._last_error = str(exc)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None

    @property
    def status(self) -> str:
        if not self.enabled:
            return "disabled"
        if self._client is None:
            return "unavailable"
        return "connected"

    @property
    def error(self) -> str | None:
        return self._last_error

    @property
    def client(self) -> Any:
        return self._client
