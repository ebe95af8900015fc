from __future__ import annotations


class CartProvisioningError(RuntimeError):
    """Raised when the cart is accessed outside a provisioned scope."""

    def __init__(self, message: str = "use_cart must be used within a CartProvider") -> None:
        super().__init__(message)


class StorageUnavailableError(RuntimeError):
    pass
