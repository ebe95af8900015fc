from __future__ import annotations

from fastapi import APIRouter, Depends

from gomarketplace.api.deps import get_cart_store
from gomarketplace.models.schemas import CartResponse, Product
from gomarketplace.store.cart_store import CartStore

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartResponse)
def get_cart(store: CartStore = Depends(get_cart_store)) -> CartResponse:
    return CartResponse(items=list(store.current_items()))


# Mutations are async so they run on the event loop that owns the snapshot writer.
@router.post("/items", response_model=CartResponse)
async def add_to_cart(payload: Product, store: CartStore = Depends(get_cart_store)) -> CartResponse:
    return CartResponse(items=list(store.add_to_cart(payload)))


@router.post("/items/{product_id}/increment", response_model=CartResponse)
async def increment(product_id: str, store: CartStore = Depends(get_cart_store)) -> CartResponse:
    return CartResponse(items=list(store.increment(product_id)))


@router.post("/items/{product_id}/decrement", response_model=CartResponse)
async def decrement(product_id: str, store: CartStore = Depends(get_cart_store)) -> CartResponse:
    return CartResponse(items=list(store.decrement(product_id)))
