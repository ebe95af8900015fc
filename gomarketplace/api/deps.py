from __future__ import annotations

from fastapi import Request

from gomarketplace.core.errors import CartProvisioningError
from gomarketplace.store.cart_store import CartStore


def get_cart_store(request: Request) -> CartStore:
    store = getattr(request.app.state, "cart_store", None)
    if not isinstance(store, CartStore):
        raise CartProvisioningError("get_cart_store requires a CartStore provisioned by the app lifespan")
    return store
