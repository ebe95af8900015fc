from __future__ import annotations

import asyncio
import logging

from gomarketplace.infrastructure.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class SnapshotWriter:
    """Writes full snapshots to one key with at most one write in flight.

    A snapshot scheduled while a write is running replaces any snapshot still
    waiting, so the last value written is always the last value scheduled.
    Failed writes are logged and dropped; the next scheduled snapshot carries
    the newer state.
    """

    def __init__(self, *, key_value_store: KeyValueStore, key: str) -> None:
        self.key_value_store = key_value_store
        self.key = key
        self._pending: str | None = None
        self._task: asyncio.Task[None] | None = None
        self.writes_completed = 0
        self.writes_failed = 0

    def schedule(self, payload: str) -> None:
        self._pending = payload
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._drain())

    async def flush(self) -> None:
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)

    async def _drain(self) -> None:
        while self._pending is not None:
            payload, self._pending = self._pending, None
            try:
                await self.key_value_store.set(self.key, payload)
            except Exception as exc:
                self.writes_failed += 1
                logger.warning("Cart snapshot write to %r failed", self.key, exc_info=exc)
            else:
                self.writes_completed += 1
