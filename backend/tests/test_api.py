"""
API tests for the wishlist, order and split payment routers.
"""

from fastapi.testclient import TestClient

import main
from main import app
from payment_gateway import ChargeResult
from tests.stubs import OTHER_USER_ID, USER_ID

ITEM = {
    "product_id": "prod-1",
    "name": "Terracotta Vase",
    "base_price": 1200,
    "discount_price": 999,
}
VERIFICATION = {
    "razorpay_payment_id": "pay_123",
    "razorpay_order_id": "order_rzp_1",
    "razorpay_signature": "sig_abc",
}


def _create_order(client, total="100.00"):
    response = client.post(
        "/api/orders",
        json={"items": [{"productId": "prod-1", "quantity": 1}], "total_amount": total},
    )
    assert response.status_code == 201
    return response.json()


def _pay_advance(client, order):
    assert client.post(f"/api/payments/split/{order['id']}").json()["success"] is True
    return client.post(f"/api/orders/{order['id']}/payments/confirm", json=VERIFICATION)


class TestInfo:
    def test_health_needs_no_auth(self, anonymous_client):
        response = anonymous_client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_info_requires_auth(self, anonymous_client):
        response = anonymous_client.get("/api/info")
        assert response.status_code == 401

    def test_info_exposes_public_checkout_settings(self, client):
        response = client.get("/api/info")
        assert response.status_code == 200
        assert response.json() == {
            "store_name": "Lotedd",
            "currency": "INR",
            "razorpay_key_id": "rzp_test_key",
        }


class TestWishlistApi:
    def test_add_list_and_status(self, client):
        assert client.post("/api/wishlist/items", json=ITEM).status_code == 204

        listing = client.get("/api/wishlist").json()
        assert [item["product_id"] for item in listing["items"]] == ["prod-1"]
        assert listing["items"][0]["added_at"] is not None

        status = client.get("/api/wishlist/items/prod-1").json()
        assert status == {"product_id": "prod-1", "in_wishlist": True, "lookup": "found"}

    def test_invalid_item_rejected(self, client):
        response = client.post("/api/wishlist/items", json={"name": "No id", "base_price": 1})
        assert response.status_code == 422

    def test_remove(self, client):
        client.post("/api/wishlist/items", json=ITEM)
        assert client.delete("/api/wishlist/items/prod-1").status_code == 204

        status = client.get("/api/wishlist/items/prod-1").json()
        assert status["in_wishlist"] is False
        assert status["lookup"] == "not_found"

    def test_status_reports_lookup_error(self, client, fake_db):
        client.post("/api/wishlist/items", json=ITEM)
        fake_db.fail_reads_from(f"wishlists/{USER_ID}/items")

        status = client.get("/api/wishlist/items/prod-1").json()

        assert status["in_wishlist"] is False
        assert status["lookup"] == "error"

    def test_metadata_and_reconcile(self, client):
        client.post("/api/wishlist/items", json=ITEM)
        client.post("/api/wishlist/items", json=ITEM)
        assert client.get("/api/wishlist/metadata").json()["item_count"] == 2

        response = client.post("/api/wishlist/reconcile")

        assert response.json() == {"previous_count": 2, "item_count": 1}
        assert client.get("/api/wishlist/metadata").json()["item_count"] == 1

    def test_clear(self, client):
        client.post("/api/wishlist/items", json=ITEM)
        client.post("/api/wishlist/items", json={**ITEM, "product_id": "prod-2"})

        assert client.delete("/api/wishlist").status_code == 204

        assert client.get("/api/wishlist").json() == {"items": []}
        assert client.get("/api/wishlist/metadata").json()["item_count"] == 0

    def test_store_write_failure_is_bad_gateway(self, client, fake_db):
        fake_db.fail_writes_to(f"wishlists/{USER_ID}/items/prod-1")
        response = client.post("/api/wishlist/items", json=ITEM)
        assert response.status_code == 502


class TestOrdersApi:
    def test_create_and_read(self, client):
        order = _create_order(client, "99.99")

        response = client.get(f"/api/orders/{order['id']}")

        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert client.get("/api/orders").json()["items"][0]["id"] == order["id"]

    def test_negative_total_rejected(self, client):
        response = client.post("/api/orders", json={"total_amount": "-5"})
        assert response.status_code == 422

    def test_missing_order_is_404(self, client):
        assert client.get("/api/orders/missing").status_code == 404

    def test_foreign_order_is_403(self, client, fake_db):
        fake_db.collection("orders").document("theirs").set(
            {"userId": OTHER_USER_ID, "totalAmount": 10.0}
        )
        assert client.get("/api/orders/theirs").status_code == 403

    def test_confirm_failure_and_cancel_flow(self, client, gateway):
        order = _create_order(client)

        confirmed = _pay_advance(client, order)
        assert confirmed.status_code == 200
        assert confirmed.json()["success"] is True

        refused = client.post(f"/api/orders/{order['id']}/payments/failure", json={})
        assert refused.status_code == 409

        cancelled = client.post(f"/api/orders/{order['id']}/cancel")
        assert cancelled.json()["status"] == "cancelled"

    def test_bad_signature_is_400(self, client, gateway):
        order = _create_order(client)
        gateway.valid_signature = False

        response = client.post(
            f"/api/orders/{order['id']}/payments/confirm", json=VERIFICATION
        )

        assert response.status_code == 400

    def test_remaining_payment_flow(self, client, gateway):
        order = _create_order(client, "99.99")
        _pay_advance(client, order)

        started = client.post(f"/api/orders/{order['id']}/payments/remaining")
        assert started.status_code == 200
        assert started.json()["amount"] == 4999

        confirmed = client.post(
            f"/api/orders/{order['id']}/payments/remaining/confirm", json=VERIFICATION
        )
        assert confirmed.status_code == 200
        assert client.get(f"/api/orders/{order['id']}").json()["payment_status"] == "completed"

    def test_remaining_gateway_refusal_is_502(self, client, gateway):
        order = _create_order(client)
        _pay_advance(client, order)
        gateway.result = ChargeResult(False, error="Gateway down")

        response = client.post(f"/api/orders/{order['id']}/payments/remaining")

        assert response.status_code == 502

    def test_checkout_of_another_order_is_400(self, client, gateway):
        cheap = _create_order(client, "2")
        dear = _create_order(client, "10000")
        client.post(f"/api/payments/split/{cheap['id']}")

        response = client.post(
            f"/api/orders/{dear['id']}/payments/confirm", json=VERIFICATION
        )

        assert response.status_code == 400
        assert client.get(f"/api/orders/{dear['id']}").json()["payment_status"] == "pending"

    def test_sub_paisa_total_rejected(self, client):
        response = client.post("/api/orders", json={"total_amount": "10.005"})
        assert response.status_code == 422

    def test_store_write_failure_is_bad_gateway(self, client, fake_db):
        fake_db.fail_writes_to("orders/doc1")

        response = client.post("/api/orders", json={"total_amount": "100"})

        assert response.status_code == 502
        assert response.json()["detail"].startswith("Order store error")

    def test_store_read_failure_is_bad_gateway(self, client, fake_db):
        order = _create_order(client)
        fake_db.fail_reads_from("orders")

        assert client.get("/api/orders").status_code == 502
        assert client.get(f"/api/orders/{order['id']}").status_code == 502
        assert client.get(f"/api/payments/split/{order['id']}").status_code == 502
        assert client.post(f"/api/payments/split/{order['id']}").status_code == 502


class TestSplitPaymentApi:
    def test_preview(self, client, gateway):
        order = _create_order(client, "99.99")

        split = client.get(f"/api/payments/split/{order['id']}").json()

        assert split["advance_amount"] == 50
        assert split["cod_amount"] == 49
        assert split["advance_minor_units"] == 5000
        assert gateway.requests == []

    def test_process_success(self, client, gateway):
        order = _create_order(client, "100.00")

        result = client.post(f"/api/payments/split/{order['id']}").json()

        assert result["success"] is True
        assert result["payment_id"] == "order_rzp_1"
        assert gateway.requests[0].amount == 5000
        assert gateway.requests[0].receipt == order["id"]

    def test_process_failure_does_not_mark_paid(self, client, gateway):
        order = _create_order(client, "100.00")
        gateway.result = ChargeResult(False, error="Card declined")

        result = client.post(f"/api/payments/split/{order['id']}").json()

        assert result == {
            "success": False,
            "payment_id": None,
            "error": "Card declined",
            "error_title": "Payment Failed",
        }
        stored = client.get(f"/api/orders/{order['id']}").json()
        assert stored["payment_status"] == "pending"
        assert stored["paid_amount"] in ("0", 0)

    def test_unknown_order(self, client):
        assert client.post("/api/payments/split/missing").status_code == 404


class TestStartup:
    def test_wildcard_origin_warns(self, fake_db, gateway, monkeypatch, caplog):
        monkeypatch.setattr(main, "allow_origins", ["*"])
        with TestClient(app):
            pass
        assert "ALLOWED_ORIGINS includes *" in caplog.text

    def test_explicit_origins_do_not_warn(self, fake_db, gateway, monkeypatch, caplog):
        monkeypatch.setattr(main, "allow_origins", ["https://shop.example.com"])
        with TestClient(app):
            pass
        assert "ALLOWED_ORIGINS" not in caplog.text
