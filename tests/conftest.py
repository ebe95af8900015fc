from __future__ import annotations

import asyncio
from typing import Any

import pytest

from gomarketplace.infrastructure.key_value_store import InMemoryKeyValueStore
from gomarketplace.models.schemas import CartItem, Product

STORAGE_KEY = "@GoMarketplace:products"


class FailingKeyValueStore(InMemoryKeyValueStore):
    name = "failing"

    def __init__(self, *, fail_get: bool = False, fail_set: bool = False, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.fail_get = fail_get
        self.fail_set = fail_set

    async def get(self, key: str) -> str | None:
        if self.fail_get:
            raise RuntimeError("storage read failed")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_set:
            raise RuntimeError("storage write failed")
        await super().set(key, value)


class GatedKeyValueStore(InMemoryKeyValueStore):
    """Holds every write until `release()` so tests can overlap mutations."""

    name = "gated"

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()
        self.writes: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def set(self, key: str, value: str) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await self.gate.wait()
            self.writes.append(value)
            await super().set(key, value)
        finally:
            self.in_flight -= 1

    def release(self) -> None:
        self.gate.set()


class SlowReadKeyValueStore(InMemoryKeyValueStore):
    """Holds every read until `release()` so tests can act while a load is pending."""

    name = "slow-read"

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__(initial)
        self.gate = asyncio.Event()

    async def get(self, key: str) -> str | None:
        await self.gate.wait()
        return await super().get(key)

    def release(self) -> None:
        self.gate.set()


def make_product(product_id: str = "p1", title: str = "Shirt", price: float = 10) -> Product:
    return Product(id=product_id, title=title, image_url="x", price=price)


def make_item(product_id: str = "p1", quantity: int = 1, **fields: Any) -> CartItem:
    base = {"title": "Shirt", "image_url": "x", "price": 10.0}
    base.update(fields)
    return CartItem(id=product_id, quantity=quantity, **base)


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()
