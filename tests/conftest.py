import os

# Settings are read at import time; configure before orderflow is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from orderflow.core.auth import create_access_token, hash_password
from orderflow.core.lifecycle import Role
from orderflow.database import create_db_and_tables, get_session, make_engine
from orderflow.main import app
from orderflow.models.product import CatalogItem
from orderflow.models.user import User
from orderflow.repositories.catalog_repo import CatalogRepository
from orderflow.repositories.order_repo import OrderRepository
from orderflow.repositories.user_repo import UserRepository
from orderflow.schemas.user import Actor
from orderflow.services.catalog_service import CatalogService
from orderflow.services.order_service import OrderService

PASSWORD = "s3cret-pass"


@pytest.fixture(scope="session")
def password():
    return PASSWORD


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is deliberately slow; hash once for the whole run
    return hash_password(PASSWORD)


@pytest.fixture()
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'orderflow.db'}")
    create_db_and_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture()
def users(session, password_hash):
    accounts = {
        "alice": Role.CUSTOMER,
        "bob": Role.CUSTOMER,
        "store": Role.STORE,
        "driver": Role.DRIVER,
        "driver2": Role.DRIVER,
    }
    created = {}
    for username, role in accounts.items():
        user = User(username=username, password_hash=password_hash, role=role.value)
        session.add(user)
        created[username] = user
    session.commit()
    for user in created.values():
        session.refresh(user)
    return created


@pytest.fixture()
def actors(users):
    return {
        name: Actor(id=user.id, username=user.username, role=user.role)
        for name, user in users.items()
    }


@pytest.fixture()
def items(session):
    rows = [
        CatalogItem(
            name_en="Burger",
            name_ar="برجر",
            category_en="Food",
            category_ar="طعام",
            price=Decimal("10.00"),
            stock=5,
        ),
        CatalogItem(
            name_en="Cola",
            name_ar="كولا",
            category_en="Drinks",
            category_ar="مشروبات",
            price=Decimal("2.50"),
            stock=10,
        ),
        CatalogItem(
            name_en="Apple Pie",
            name_ar="فطيرة تفاح",
            category_en="Desserts",
            category_ar="حلويات",
            price=Decimal("4.00"),
            stock=0,
        ),
    ]
    session.add_all(rows)
    session.commit()
    for row in rows:
        session.refresh(row)
    return {row.name_en: row.id for row in rows}


@pytest.fixture()
def service():
    return OrderService(
        OrderRepository(),
        CatalogService(CatalogRepository()),
        UserRepository(),
    )


@pytest.fixture()
def stock_of(engine):
    """Read an item's stock through a fresh session."""

    def _stock(item_id: int) -> int:
        with Session(engine) as s:
            return s.get(CatalogItem, item_id).stock

    return _stock


@pytest.fixture()
def client(engine):
    def _get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(users):
    def _headers(username: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(users[username])}"}

    return _headers
