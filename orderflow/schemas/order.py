# orderflow/schemas/order.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

from orderflow.core.lifecycle import OrderStatus

PaymentMethod = Literal["cash", "credit_card"]


class OrderItemCreate(SQLModel):
    """
    One requested line: catalog item id + quantity.

    Clients usually post whole cart entries (name, price, image...);
    everything except id/quantity is ignored, and the price is always
    re-read from the catalog.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    quantity: int


class OrderCreate(SQLModel):
    """
    Payload for placing an order.

    User provides:
      - items
      - delivery_address
      - payment_method (optional, defaults to DEFAULT_PAYMENT_METHOD)
      - total (optional, display hint only)

    Backend derives:
      - customer_id from token
      - status = 'placed'
      - unit prices and total from the catalog
    """

    model_config = ConfigDict(extra="forbid")

    items: list[OrderItemCreate] = []
    total: Decimal | None = None
    delivery_address: str | None = None
    payment_method: PaymentMethod | None = None


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: int
    product_id: int
    name_en: str
    name_ar: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderRead(SQLModel):
    """
    Full order view including items.
    """

    id: int
    customer_id: int
    customer_name: str | None
    driver_id: int | None
    status: OrderStatus
    total: Decimal
    payment_method: PaymentMethod
    delivery_address: str
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    """
    Payload to move an order to its next status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
