# orderflow/seed.py
"""
Demo data for local development.

    python -m orderflow.seed

Creates tables, one account per role and a small bilingual catalog.
Safe to run repeatedly: existing usernames / product names are skipped.
"""

import logging
from decimal import Decimal

from sqlalchemy.engine import Engine
from sqlmodel import Session

from orderflow.core.auth import hash_password
from orderflow.core.config import get_settings
from orderflow.core.lifecycle import Role
from orderflow.database import create_db_and_tables, engine
from orderflow.models.product import CatalogItem
from orderflow.models.user import User
from orderflow.repositories.catalog_repo import CatalogRepository
from orderflow.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

DEMO_USERS: list[tuple[str, Role]] = [
    ("customer1", Role.CUSTOMER),
    ("store1", Role.STORE),
    ("driver1", Role.DRIVER),
]

DEMO_PRODUCTS: list[dict] = [
    {
        "name_en": "Margherita Pizza",
        "name_ar": "بيتزا مارغريتا",
        "description_en": "Tomato, mozzarella and basil",
        "description_ar": "طماطم وموزاريلا وريحان",
        "category_en": "Food",
        "category_ar": "طعام",
        "price": Decimal("12.50"),
        "stock": 20,
    },
    {
        "name_en": "Chicken Shawarma",
        "name_ar": "شاورما دجاج",
        "description_en": "Wrap with garlic sauce",
        "description_ar": "لفافة مع صلصة الثوم",
        "category_en": "Food",
        "category_ar": "طعام",
        "price": Decimal("6.00"),
        "stock": 40,
    },
    {
        "name_en": "Orange Juice",
        "name_ar": "عصير برتقال",
        "description_en": "Freshly squeezed",
        "description_ar": "طازج",
        "category_en": "Drinks",
        "category_ar": "مشروبات",
        "price": Decimal("3.25"),
        "stock": 50,
    },
    {
        "name_en": "Mineral Water",
        "name_ar": "مياه معدنية",
        "description_en": "500 ml bottle",
        "description_ar": "عبوة 500 مل",
        "category_en": "Drinks",
        "category_ar": "مشروبات",
        "price": Decimal("1.00"),
        "stock": 100,
    },
    {
        "name_en": "Baklava Box",
        "name_ar": "علبة بقلاوة",
        "description_en": "Assorted, 12 pieces",
        "description_ar": "تشكيلة، 12 قطعة",
        "category_en": "Desserts",
        "category_ar": "حلويات",
        "price": Decimal("9.75"),
        "stock": 0,
    },
]


def seed(bind: Engine | None = None, password: str | None = None) -> dict[str, int]:
    """
    Insert demo users and products that are not there yet.

    Returns how many rows of each kind were created.
    """
    bind = bind or engine
    password = password or get_settings().SEED_PASSWORD
    create_db_and_tables(bind)

    users = UserRepository()
    catalog = CatalogRepository()
    created = {"users": 0, "products": 0}

    with Session(bind) as session:
        for username, role in DEMO_USERS:
            if users.get_by_username(session, username) is not None:
                continue
            users.create(
                session,
                User(username=username, password_hash=hash_password(password), role=role.value),
            )
            created["users"] += 1

        existing = {item.name_en for item in catalog.list_all(session)}
        for data in DEMO_PRODUCTS:
            if data["name_en"] in existing:
                continue
            catalog.create(session, CatalogItem(**data))
            created["products"] += 1

    logger.info(
        "Seed complete: %d users, %d products created",
        created["users"],
        created["products"],
    )
    return created


if __name__ == "__main__":
    logging.basicConfig(level=get_settings().LOG_LEVEL)
    seed()
