from __future__ import annotations

from typing import Sequence

from pydantic import TypeAdapter

from gomarketplace.infrastructure.key_value_store import KeyValueStore
from gomarketplace.infrastructure.snapshot_writer import SnapshotWriter
from gomarketplace.models.schemas import CartItem

_CART_ADAPTER = TypeAdapter(list[CartItem])


def dump_snapshot(items: Sequence[CartItem]) -> str:
    return _CART_ADAPTER.dump_json(list(items)).decode("utf-8")


def load_snapshot(raw: str | bytes) -> tuple[CartItem, ...]:
    items = tuple(_CART_ADAPTER.validate_json(raw))
    if len({item.id for item in items}) != len(items):
        raise ValueError("Cart snapshot contains duplicate item ids")
    return items


class CartRepository:
    def __init__(self, *, key_value_store: KeyValueStore, storage_key: str) -> None:
        self.key_value_store = key_value_store
        self.storage_key = storage_key
        self.writer = SnapshotWriter(key_value_store=key_value_store, key=storage_key)

    async def load(self) -> tuple[CartItem, ...] | None:
        raw = await self.key_value_store.get(self.storage_key)
        if not raw:
            return None
        return load_snapshot(raw)

    def save(self, items: Sequence[CartItem]) -> None:
        self.writer.schedule(dump_snapshot(items))

    async def flush(self) -> None:
        await self.writer.flush()
