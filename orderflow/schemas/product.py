# orderflow/schemas/product.py
from decimal import Decimal

from sqlmodel import SQLModel


class CatalogItemRead(SQLModel):
    """
    Catalog entry as shown to clients, both locales included.
    """

    id: int
    name_en: str
    name_ar: str
    description_en: str | None
    description_ar: str | None
    category_en: str
    category_ar: str
    price: Decimal
    stock: int
    image_url: str | None
