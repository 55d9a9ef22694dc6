# orderflow/models/product.py
from decimal import Decimal

from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field


class CatalogItem(SQLModel, table=True):
    """
    Catalog entry that customers can order.

    Texts are stored in two locales (English / Arabic). The English
    fields are the canonical sort key for listings.

    The stock CHECK constraint is the last line of defence: a decrement
    that would push stock below zero is rejected by the database itself.
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="products_stock_non_negative"),
        CheckConstraint("price >= 0", name="products_price_non_negative"),
    )

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    name_en: str = Field(max_length=100, index=True)
    name_ar: str = Field(max_length=100)

    description_en: str | None = Field(default=None)
    description_ar: str | None = Field(default=None)

    category_en: str = Field(max_length=50, index=True)
    category_ar: str = Field(max_length=50)

    price: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Current unit price",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="Units currently available",
    )

    image_url: str | None = Field(
        default=None,
        description="Product image URL",
    )
