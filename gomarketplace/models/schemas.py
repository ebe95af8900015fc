from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    id: str
    title: str
    image_url: str
    price: float


class CartItem(Product):
    quantity: int = Field(ge=1)

    @classmethod
    def from_product(cls, product: Product) -> "CartItem":
        return cls(**product.model_dump(exclude={"quantity"}), quantity=1)


class CartResponse(BaseModel):
    items: list[CartItem]


class StorageHealth(BaseModel):
    backend: str
    status: str
    error: str | None = None
