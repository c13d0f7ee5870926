import os

# must be set before storefront is imported, settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import storefront.data.models  # noqa: F401
from storefront.api import create_app
from storefront.api.deps import get_product_client
from storefront.data.database import Base, SessionLocal, engine
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import CustomerCreate
from storefront.services.customer_service import CustomerService


class FakeProductClient:
    """Stands in for the product service, prices keyed by product / variation id."""

    def __init__(self):
        self.products = {
            "P1": Decimal("10.00"),
            "P2": Decimal("4.50"),
            "P3": Decimal("99.99"),
        }
        self.variations = {
            ("P1", "RED"): Decimal("12.00"),
            ("P1", "BLUE"): Decimal("11.00"),
        }
        self.calls = []

    def fetch_product(self, product_id: str) -> dict:
        self.calls.append((product_id, None))
        if product_id not in self.products:
            raise NotFoundError(f"Product '{product_id}' not found")
        return {"id": product_id, "price": str(self.products[product_id])}

    def fetch_variation(self, product_id: str, variation_id: str) -> dict:
        self.calls.append((product_id, variation_id))
        key = (product_id, variation_id)
        if key not in self.variations:
            raise NotFoundError(f"Variation '{variation_id}' of product '{product_id}' not found")
        return {"id": variation_id, "product_id": product_id, "price": str(self.variations[key])}


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def product_client():
    return FakeProductClient()


@pytest.fixture()
def app(product_client):
    app = create_app()
    app.dependency_overrides[get_product_client] = lambda: product_client
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def make_customer(db):
    def _make(email="jane@example.com", **overrides):
        data = {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": email,
            "password": "s3cret-pass",
        }
        data.update(overrides)
        return CustomerService(db).create_customer(CustomerCreate(**data))

    return _make


@pytest.fixture()
def customer(make_customer):
    return make_customer()


def _address(**overrides):
    data = {
        "first_name": "Jane",
        "last_name": "Doe",
        "address_line1": "1 Main St",
        "city": "Springfield",
        "postal_code": "12345",
        "country": "US",
        "email": "jane@example.com",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def order_payload():
    """
    Builds an order body. Defaults: one line of 2 x 10.00, shipping 5,
    tax 2, discount 3, so 20 + 5 + 2 - 3 == 24.
    """

    def _build(customer_id: int, **overrides) -> dict:
        data = {
            "customer_id": customer_id,
            "payment_method": "credit_card",
            "subtotal": "20.00",
            "shipping_total": "5.00",
            "tax_total": "2.00",
            "discount_total": "3.00",
            "total": "24.00",
            "billing_address": _address(),
            "shipping_address": _address(),
            "items": [
                {
                    "product_id": "P1",
                    "name": "Keyboard",
                    "sku": "KB-001",
                    "quantity": 2,
                    "price": "10.00",
                    "subtotal": "20.00",
                    "total": "20.00",
                }
            ],
        }
        data.update(overrides)
        return data

    return _build
