# orderflow/models/order.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(SQLModel, table=True):
    """
    Customer order.

    Columns:
      - id, customer_id, driver_id, status, total,
        payment_method, delivery_address, created_at, updated_at

    `status` only changes through OrderService.transition_status.
    `total` is computed server-side from catalog prices at creation.
    """

    __tablename__ = "orders"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    customer_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    # Driver who picked the order up (ready -> out_for_delivery)
    driver_id: int | None = Field(
        default=None,
        foreign_key="users.id",
        index=True,
    )

    # placed | confirmed | preparing | ready | out_for_delivery | delivered | cancelled
    status: str = Field(
        default="placed",
        max_length=20,
        index=True,
        description="Order status lifecycle",
    )

    total: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Sum of quantity * unit_price over all items",
    )

    # cash | credit_card
    payment_method: str = Field(
        max_length=20,
        description="Payment method chosen at checkout",
    )

    delivery_address: str = Field(
        description="Free-text delivery address",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last status change (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    `unit_price`, `name_en` and `name_ar` are snapshots of the catalog
    row when the order was placed; later catalog edits do not touch them.
    """

    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="order_items_quantity_positive"),
    )

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    order_id: int = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
    )

    # Display names copied from the catalog when the order was placed
    name_en: str = Field(max_length=100)
    name_ar: str = Field(max_length=100)

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    unit_price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Unit price at time of order",
    )
