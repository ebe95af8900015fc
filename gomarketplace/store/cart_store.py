from __future__ import annotations

import logging

from gomarketplace.core.errors import CartProvisioningError
from gomarketplace.models.schemas import Product
from gomarketplace.repositories.cart_repository import CartRepository
from gomarketplace.services.cart_service import Cart, add_item, decrement_item, increment_item

logger = logging.getLogger(__name__)


class CartStore:
    """In-memory cart kept in sync with a persisted snapshot.

    Mutations replace the cart synchronously and schedule a background write of
    the whole cart, so they must run inside an event loop. Readers always see
    the latest mutation, whether or not its write has landed.
    """

    def __init__(self, *, cart_repository: CartRepository) -> None:
        self.cart_repository = cart_repository
        self._items: Cart = ()
        self._initialized = False
        self._loading = False

    @property
    def items(self) -> Cart:
        return self._items

    @property
    def initialized(self) -> bool:
        return self._initialized

    def current_items(self) -> Cart:
        return self._items

    async def initialize(self) -> None:
        if self._initialized or self._loading:
            return
        self._loading = True
        try:
            stored = await self.cart_repository.load()
        except Exception as exc:
            logger.warning(
                "Could not restore cart from %r, starting empty",
                self.cart_repository.storage_key,
                exc_info=exc,
            )
            stored = None
        self._items = stored or ()
        self._loading = False
        self._initialized = True
        logger.debug("Cart restored with %d item(s)", len(self._items))

    def add_to_cart(self, product: Product) -> Cart:
        return self._commit(add_item(self._items, product))

    def increment(self, product_id: str) -> Cart:
        return self._commit(increment_item(self._items, product_id))

    def decrement(self, product_id: str) -> Cart:
        return self._commit(decrement_item(self._items, product_id))

    async def flush(self) -> None:
        await self.cart_repository.flush()

    def _commit(self, items: Cart) -> Cart:
        # A write issued before the load lands would clobber the stored cart.
        if not self._initialized:
            raise CartProvisioningError("CartStore.initialize() must complete before the cart is mutated")
        self.cart_repository.save(items)
        self._items = items
        return items
