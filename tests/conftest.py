import os

# Settings are read at import time, point them at a throwaway database first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_PRODUCTS", "false")

import json
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from starlette.websockets import WebSocketState

from app.crud import cart as cart_crud, products as product_crud
from app.db.base import Base
from app.db import models  # noqa: F401
from app.db.session import enable_sqlite_foreign_keys
from app.dependencies import get_db
from app.main import app

# Setup the database for testing
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def test_client():
    with TestClient(app) as client:
        yield client


# Override the get_db dependency to use the testing database
def override_get_db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def make_product(db_session: Session):
    counter = iter(range(1, 10_000))

    def _make_product(
        barcode: str | None = None,
        price: str = "50.00",
        name: str = "Test Product",
        category: str = "Snacks",
    ) -> models.Product:
        return product_crud.create_product(
            db_session,
            barcode=barcode or f"TEST{next(counter):06d}",
            name=name,
            price=Decimal(price),
            category=category,
            description="A product for testing",
        )

    return _make_product


@pytest.fixture
def make_cart(db_session: Session):
    def _make_cart(cart_id: str = "CART-1", budget: str = "100.00") -> models.Cart:
        return cart_crud.create_cart(db_session, cart_id, Decimal(budget))

    return _make_cart


class FakeWebSocket:
    """Stands in for a starlette WebSocket in registry and heartbeat tests."""

    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket is broken")
        self.sent.append(json.loads(data))

    def close(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED
        self.application_state = WebSocketState.DISCONNECTED

    def types(self) -> list[str]:
        return [message["type"] for message in self.sent]


@pytest.fixture
def fake_websocket():
    return FakeWebSocket
