# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime

from app.domain.order_status import OrderStatus


class ProductOut(BaseModel):
    """Schema dla produktu (response)."""

    id: int
    name: str
    description: str | None = None
    price: int
    category: str | None = None
    stock_quantity: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PaginatedProductsOut(BaseModel):
    products: List[ProductOut]
    total: int
    page: int
    page_size: int
    total_pages: int


class CategoryOut(BaseModel):
    id: str
    name: str
    label: str


class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int
    quantity: int = Field(1, description="Ilość produktu, walidacja > 0 w serwisie")


class CartItemUpdateIn(BaseModel):
    quantity: int


class CartItemOut(BaseModel):
    """Pozycja koszyka razem z aktualnym produktem."""

    id: int
    clerk_id: str
    product_id: int
    quantity: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    product: ProductOut | None = None

    model_config = ConfigDict(from_attributes=True)


class CartSummaryOut(BaseModel):
    total_items: int
    total_quantity: int
    total_price: int


class CartOut(BaseModel):
    items: List[CartItemOut]
    summary: CartSummaryOut


class CartCountOut(BaseModel):
    count: int


class CartClearedOut(BaseModel):
    deleted: int


class ShippingAddress(BaseModel):
    """Adres dostawy, zapisywany w zamowieniu jako snapshot (JSON)."""

    name: str = ""
    phone: str = ""
    postal_code: str = Field("", alias="postalCode")
    address: str = ""

    model_config = ConfigDict(populate_by_name=True)

    def missing_fields(self) -> List[str]:
        return [
            field
            for field in ("name", "phone", "postal_code", "address")
            if not getattr(self, field).strip()
        ]


class OrderLineIn(BaseModel):
    """
    Pozycja koszyka przekazana przez klienta.
    price / product_name to snapshot klienta, serwer ich nie uzywa do wyliczen.
    """

    product_id: int
    quantity: int = Field(..., gt=0)
    price: int | None = None
    product_name: str | None = None


class OrderCreateIn(BaseModel):
    """Adres opcjonalny w body, pusty koszyk ma pierwszenstwo przed walidacja adresu."""

    items: List[OrderLineIn] = []
    shipping_address: ShippingAddress | None = None
    order_note: str | None = None


class OrderCreated(BaseModel):
    """
    Wynik tworzenia zamowienia.
    Zamowienie i czyszczenie koszyka raportowane osobno, czyszczenie jest best-effort.
    """

    order_id: str
    total_amount: int
    cart_cleared: bool
    cart_clear_error: str | None = None


class OrderItemOut(BaseModel):
    id: int
    order_id: str
    product_id: int
    product_name: str
    quantity: int
    price: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: str
    clerk_id: str
    total_amount: int
    status: OrderStatus
    shipping_address: dict | None = None
    order_note: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderWithItemsOut(OrderOut):
    items: List[OrderItemOut]


class OrderStatusIn(BaseModel):
    status: OrderStatus


class PaymentConfirmIn(BaseModel):
    """
    Callback po platnosci w widgecie operatora.
    Pola opcjonalne, brak pola to InvalidInput (400) z serwisu a nie 422.
    """

    payment_key: str | None = Field(None, alias="paymentKey")
    order_id: str | None = Field(None, alias="orderId")
    amount: int | None = None

    model_config = ConfigDict(populate_by_name=True)


class PaymentConfirmOut(BaseModel):
    success: bool
    order_id: str = Field(..., serialization_alias="orderId")
    payment_key: str = Field(..., serialization_alias="paymentKey")
    amount: int
    payment_result: dict = Field(..., serialization_alias="paymentResult")
