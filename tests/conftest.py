"""Wspolne fixture'y: baza sqlite w pamieci, produkty, klient HTTP."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORE_RETRY_ATTEMPTS"] = "3"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_payment_client
from app.data import models  # noqa: F401
from app.data.database import Base, get_db
from app.data.models.product import ProductModel
from app.domain.caller import Caller
from app.domain.errors import PaymentProcessorError
from app.main import create_app


class FakePaymentClient:
    """Zamiast Toss Payments, zapisuje wywolania."""

    def __init__(self):
        self.calls = []
        self.error = None
        self.error_type = PaymentProcessorError
        self.on_confirm = None

    def confirm_payment(self, payment_key, order_id, amount):
        self.calls.append((payment_key, order_id, amount))
        if self.on_confirm:
            self.on_confirm(order_id)
        if self.error:
            raise self.error_type(self.error)
        return {"paymentKey": payment_key, "orderId": order_id, "totalAmount": amount, "status": "DONE"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def alice():
    return Caller(clerk_id="user_alice")


@pytest.fixture
def bob():
    return Caller(clerk_id="user_bob")


@pytest.fixture
def make_product(db):
    def _make(name="Gitara", price=10000, stock_quantity=10, is_active=True, category="electronics", **kwargs):
        product = ProductModel(
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            is_active=is_active,
            category=category,
            **kwargs,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def payment_client():
    return FakePaymentClient()


@pytest.fixture
def client(session_factory, payment_client):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_client] = lambda: payment_client
    return TestClient(app)


@pytest.fixture
def auth():
    def _headers(caller):
        return {"X-Clerk-User-Id": caller.clerk_id}

    return _headers


@pytest.fixture
def shipping():
    return {
        "name": "Hong Gildong",
        "phone": "010-1234-5678",
        "postalCode": "06236",
        "address": "Seoul, Gangnam-gu, Teheran-ro 123",
    }
