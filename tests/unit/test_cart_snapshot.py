from __future__ import annotations

import json
import math

import pytest
from conftest import STORAGE_KEY, make_item
from pydantic import ValidationError

from gomarketplace.infrastructure.key_value_store import InMemoryKeyValueStore
from gomarketplace.repositories.cart_repository import CartRepository, dump_snapshot, load_snapshot


def test_snapshot_roundtrip_preserves_items_and_order() -> None:
    items = (
        make_item("p2", quantity=3, title="Mug", price=4.5),
        make_item("p1", quantity=1, title="Shirt", image_url="https://cdn/x.png"),
    )

    assert load_snapshot(dump_snapshot(items)) == items


def test_snapshot_is_a_json_array_of_items() -> None:
    raw = dump_snapshot((make_item("p1", quantity=2),))

    assert json.loads(raw) == [
        {"id": "p1", "title": "Shirt", "image_url": "x", "price": 10.0, "quantity": 2}
    ]


def test_load_snapshot_rejects_malformed_payloads() -> None:
    with pytest.raises(ValidationError):
        load_snapshot("not json")
    with pytest.raises(ValidationError):
        load_snapshot('{"id": "p1"}')
    with pytest.raises(ValidationError):
        load_snapshot('[{"id": "p1", "title": "t", "image_url": "x", "price": 1, "quantity": 0}]')


def test_load_snapshot_rejects_duplicate_item_ids() -> None:
    raw = dump_snapshot((make_item("p1"), make_item("p2"), make_item("p1", quantity=3)))

    with pytest.raises(ValueError, match="duplicate"):
        load_snapshot(raw)


def test_snapshot_roundtrip_keeps_non_finite_prices() -> None:
    items = (
        make_item("p1", price=float("inf")),
        make_item("p2", price=float("-inf")),
        make_item("p3", price=float("nan")),
    )

    raw = dump_snapshot(items)
    restored = load_snapshot(raw)

    assert "null" not in raw
    assert [item.price for item in restored[:2]] == [float("inf"), float("-inf")]
    assert math.isnan(restored[2].price)


@pytest.mark.asyncio
async def test_repository_load_returns_none_when_key_missing() -> None:
    repository = CartRepository(key_value_store=InMemoryKeyValueStore(), storage_key=STORAGE_KEY)

    assert await repository.load() is None


@pytest.mark.asyncio
async def test_repository_save_writes_full_snapshot_under_fixed_key() -> None:
    kv = InMemoryKeyValueStore()
    repository = CartRepository(key_value_store=kv, storage_key=STORAGE_KEY)
    items = (make_item("p1", quantity=2), make_item("p2"))

    repository.save(items)
    await repository.flush()

    assert list(kv.values) == [STORAGE_KEY]
    assert await repository.load() == items
