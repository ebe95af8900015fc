from __future__ import annotations

from contextvars import ContextVar, Token
from types import TracebackType

from gomarketplace.core.errors import CartProvisioningError
from gomarketplace.infrastructure.key_value_store import KeyValueStore
from gomarketplace.repositories.cart_repository import CartRepository
from gomarketplace.store.cart_store import CartStore

_current_cart: ContextVar[CartStore | None] = ContextVar("current_cart", default=None)


class CartProvider:
    """Provisions a restored CartStore for the enclosed scope.

        async with CartProvider(key_value_store=kv, storage_key=key) as cart:
            use_cart().add_to_cart(product)

    Pending snapshot writes are flushed on exit.
    """

    def __init__(self, *, key_value_store: KeyValueStore, storage_key: str) -> None:
        self.store = CartStore(
            cart_repository=CartRepository(key_value_store=key_value_store, storage_key=storage_key)
        )
        self._token: Token[CartStore | None] | None = None

    async def __aenter__(self) -> CartStore:
        await self.store.initialize()
        self._token = _current_cart.set(self.store)
        return self.store

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            await self.store.flush()
        finally:
            if self._token is not None:
                _current_cart.reset(self._token)
                self._token = None


def use_cart() -> CartStore:
    store = _current_cart.get()
    if store is None:
        raise CartProvisioningError()
    return store
