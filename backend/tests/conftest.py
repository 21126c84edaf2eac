import os

os.environ.setdefault("FIREBASE_WEB_API_KEY", "test-web-api-key")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "rzp_test_secret")
os.environ.setdefault("PAYMENT_CURRENCY", "INR")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import firebase_client  # noqa: E402
import payment_gateway  # noqa: E402
from auth import get_current_user_id  # noqa: E402
from main import app  # noqa: E402
from schemas import WishlistItemCreate  # noqa: E402
from tests.fake_firestore import FakeFirestore  # noqa: E402
from tests.stubs import USER_ID, StubGateway  # noqa: E402


@pytest.fixture
def fake_db(monkeypatch):
    """Route every repository call to an in-memory Firestore."""
    db = FakeFirestore()
    monkeypatch.setattr(firebase_client, "_db", db)
    return db


@pytest.fixture
def gateway(monkeypatch):
    stub = StubGateway()
    monkeypatch.setattr(payment_gateway, "_gateway", stub)
    return stub


@pytest.fixture
def wishlist_item():
    return WishlistItemCreate(
        product_id="prod-1",
        name="Terracotta Vase",
        base_price=1200.0,
        discount_price=999.0,
        featured_image="https://cdn.example.com/vase.jpg",
        brand="Lotedd",
    )


@pytest.fixture
def make_item():
    def _make(product_id: str, **overrides) -> WishlistItemCreate:
        data = {"product_id": product_id, "name": f"Product {product_id}", "base_price": 100.0}
        data.update(overrides)
        return WishlistItemCreate(**data)

    return _make


@pytest.fixture
def client(fake_db, gateway):
    """Return an API client authenticated as USER_ID."""
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_db, gateway):
    with TestClient(app) as test_client:
        yield test_client
