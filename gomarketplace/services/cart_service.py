from __future__ import annotations

from typing import Sequence

from gomarketplace.models.schemas import CartItem, Product

Cart = tuple[CartItem, ...]


def add_item(items: Sequence[CartItem], product: Product) -> Cart:
    existing = next((item for item in items if item.id == product.id), None)
    if existing is None:
        return (*items, CartItem.from_product(product))
    # The stored entry keeps its own fields; only the quantity moves.
    return increment_item(items, existing.id)


def increment_item(items: Sequence[CartItem], product_id: str) -> Cart:
    return tuple(
        item.model_copy(update={"quantity": item.quantity + 1}) if item.id == product_id else item
        for item in items
    )


def decrement_item(items: Sequence[CartItem], product_id: str) -> Cart:
    updated = [
        item.model_copy(update={"quantity": item.quantity - 1}) if item.id == product_id else item
        for item in items
    ]
    return tuple(item for item in updated if not (item.id == product_id and item.quantity <= 0))
