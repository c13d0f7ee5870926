"""Order reconciliation, status state table and the order endpoints."""

from decimal import Decimal

import pytest

from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import OrderCreate, OrderItemIn, OrderUpdate, PaginationParams
from storefront.services.order_service import ORDER_TRANSITIONS, OrderService, is_valid_transition


class RecordingNotifications:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, customer_id, order_id, status):
        self.sent.append((customer_id, order_id, status))


@pytest.fixture()
def notifications():
    return RecordingNotifications()


@pytest.fixture()
def service(db, notifications):
    return OrderService(db, notification_service=notifications)


@pytest.fixture()
def place_order(service, customer, order_payload):
    def _place(**overrides):
        return service.create_order(OrderCreate(**order_payload(customer.id, **overrides)))

    return _place


def _walk(service, order_id, *statuses):
    order = None
    for status in statuses:
        order = service.update_status(order_id, status)
    return order


class TestTransitions:
    @pytest.mark.parametrize(
        "current,new",
        [
            (OrderStatus.PENDING, OrderStatus.PROCESSING),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.PENDING, OrderStatus.FAILED),
            (OrderStatus.PROCESSING, OrderStatus.COMPLETED),
            (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
            (OrderStatus.PROCESSING, OrderStatus.FAILED),
            (OrderStatus.COMPLETED, OrderStatus.REFUNDED),
            (OrderStatus.FAILED, OrderStatus.PENDING),
        ],
    )
    def test_allowed(self, current, new):
        assert is_valid_transition(current, new)

    @pytest.mark.parametrize(
        "current,new",
        [
            (OrderStatus.COMPLETED, OrderStatus.PROCESSING),
            (OrderStatus.PENDING, OrderStatus.COMPLETED),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
            (OrderStatus.REFUNDED, OrderStatus.COMPLETED),
            (OrderStatus.FAILED, OrderStatus.PROCESSING),
        ],
    )
    def test_rejected(self, current, new):
        assert not is_valid_transition(current, new)

    def test_terminal_states(self):
        assert ORDER_TRANSITIONS[OrderStatus.CANCELLED] == frozenset()
        assert ORDER_TRANSITIONS[OrderStatus.REFUNDED] == frozenset()

    def test_accepts_plain_strings(self):
        assert is_valid_transition("completed", "refunded")


class TestCreateOrder:
    def test_defaults_and_snapshot(self, place_order, customer, notifications):
        order = place_order()

        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.UNPAID.value
        assert order.currency == "USD"
        assert Decimal(str(order.total)) == Decimal("24.00")
        assert order.items[0].name == "Keyboard"
        assert order.billing_address["city"] == "Springfield"
        assert notifications.sent == [(customer.id, order.id, "pending")]

    def test_unknown_customer(self, service, order_payload):
        with pytest.raises(NotFoundError):
            service.create_order(OrderCreate(**order_payload(999)))

    def test_total_off_by_a_cent_is_tolerated(self, place_order):
        order = place_order(total="24.01")
        assert Decimal(str(order.total)) == Decimal("24.01")

    def test_total_mismatch_rejected(self, place_order):
        with pytest.raises(ValidationFailed):
            place_order(total="24.02")

    def test_subtotal_must_match_items(self, place_order):
        with pytest.raises(ValidationFailed, match="Subtotal"):
            place_order(subtotal="25.00", total="29.00")

    def test_item_totals_must_match_total_before_adjustments(self, place_order):
        items = [
            {
                "product_id": "P1",
                "name": "Keyboard",
                "quantity": 2,
                "price": "10.00",
                "subtotal": "20.00",
                "total": "18.00",
            }
        ]
        with pytest.raises(ValidationFailed, match="item totals"):
            place_order(items=items)

    def test_several_lines(self, place_order):
        items = [
            {"product_id": "P1", "name": "Keyboard", "quantity": 1, "price": "10.00",
             "subtotal": "10.00", "total": "10.00"},
            {"product_id": "P2", "name": "Mouse", "quantity": 2, "price": "4.50",
             "subtotal": "9.00", "total": "9.00"},
        ]
        order = place_order(items=items, subtotal="19.00", total="23.00")
        assert [i.product_id for i in order.items] == ["P1", "P2"]

    def test_reconciliation_holds_for_stored_orders(self, place_order):
        order = place_order(shipping_total="0", tax_total="1.50", discount_total="0", total="21.50")

        drift = (
            Decimal(str(order.subtotal))
            + Decimal(str(order.shipping_total))
            + Decimal(str(order.tax_total))
            - Decimal(str(order.discount_total))
            - Decimal(str(order.total))
        )
        assert abs(drift) <= Decimal("0.01")


class TestUpdateStatus:
    def test_happy_path_to_refund(self, service, place_order, notifications):
        order = place_order()

        order = _walk(service, order.id, OrderStatus.PROCESSING, OrderStatus.COMPLETED, OrderStatus.REFUNDED)

        assert order.status == "refunded"
        assert [s for _, _, s in notifications.sent] == ["pending", "processing", "completed", "refunded"]

    def test_completed_to_processing_rejected(self, service, place_order):
        order = place_order()
        _walk(service, order.id, OrderStatus.PROCESSING, OrderStatus.COMPLETED)

        with pytest.raises(ValidationFailed, match="Invalid status transition"):
            service.update_status(order.id, OrderStatus.PROCESSING)
        assert service.get_order(order.id).status == "completed"

    def test_failed_can_retry(self, service, place_order):
        order = place_order()
        order = _walk(service, order.id, OrderStatus.FAILED, OrderStatus.PENDING)
        assert order.status == "pending"

    def test_payment_status_is_independent(self, service, place_order):
        order = place_order()
        _walk(service, order.id, OrderStatus.PROCESSING, OrderStatus.COMPLETED)

        order = service.update_payment_status(order.id, PaymentStatus.UNPAID)

        assert order.status == "completed"
        assert order.payment_status == "unpaid"


class TestUpdateOrder:
    def test_replacing_items_recomputes_totals(self, service, place_order):
        order = place_order()
        items = [
            OrderItemIn(product_id="P3", name="Monitor", quantity=1, price=Decimal("99.99"),
                        subtotal=Decimal("99.99"), total=Decimal("99.99")),
        ]

        updated = service.update_order(order.id, OrderUpdate(items=items, shipping_total=Decimal("0")))

        assert Decimal(str(updated.subtotal)) == Decimal("99.99")
        # 99.99 + shipping 0 + tax 2 - discount 3
        assert Decimal(str(updated.total)) == Decimal("98.99")
        assert [i.product_id for i in updated.items] == ["P3"]

    def test_plain_field_update(self, service, place_order):
        order = place_order()
        updated = service.update_order(order.id, OrderUpdate(payment_method="paypal"))
        assert updated.payment_method == "paypal"
        assert Decimal(str(updated.total)) == Decimal("24.00")


class TestQueries:
    def test_filters_and_stats(self, service, place_order, make_customer, order_payload):
        first = place_order()
        place_order()
        other = make_customer(email="other@example.com")
        service.create_order(OrderCreate(**order_payload(other.id)))

        _walk(service, first.id, OrderStatus.PROCESSING, OrderStatus.COMPLETED)
        service.update_payment_status(first.id, PaymentStatus.PAID)

        params = PaginationParams()
        assert service.list_orders(params)["total"] == 3
        assert service.find_by_customer(other.id, params)["total"] == 1
        assert service.find_by_status(OrderStatus.COMPLETED, params)["data"][0].id == first.id
        assert service.find_by_payment_status(PaymentStatus.PAID, params)["total"] == 1

        stats = service.get_stats()
        assert stats == {
            "total_orders": 3,
            "total_revenue": Decimal("24.00"),
            "pending_orders": 2,
            "completed_orders": 1,
        }

    def test_delete_refused_when_payment_exists(self, service, place_order, client):
        order = place_order()
        client.post("/payments", json={"order_id": order.id, "amount": "24.00", "method": "paypal"})

        with pytest.raises(ConflictError):
            service.delete_order(order.id)

    def test_delete(self, service, place_order):
        order = place_order()
        service.delete_order(order.id)
        with pytest.raises(NotFoundError):
            service.get_order(order.id)


class TestOrdersAPI:
    def test_create_returns_201(self, client, customer, order_payload):
        response = client.post("/orders", json=order_payload(customer.id))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert Decimal(str(body["total"])) == Decimal("24.00")
        assert body["items"][0]["sku"] == "KB-001"

    def test_mismatched_totals_return_400(self, client, customer, order_payload):
        response = client.post("/orders", json=order_payload(customer.id, total="30.00"))
        assert response.status_code == 400

    def test_empty_items_return_400(self, client, customer, order_payload):
        response = client.post("/orders", json=order_payload(customer.id, items=[]))
        assert response.status_code == 400

    def test_status_routes(self, client, customer, order_payload):
        order_id = client.post("/orders", json=order_payload(customer.id)).json()["id"]

        ok = client.patch(f"/orders/{order_id}/status", json={"status": "processing"})
        assert ok.status_code == 200
        client.patch(f"/orders/{order_id}/status", json={"status": "completed"})

        rejected = client.patch(f"/orders/{order_id}/status", json={"status": "processing"})
        assert rejected.status_code == 400

        refunded = client.patch(f"/orders/{order_id}/status", json={"status": "refunded"})
        assert refunded.json()["status"] == "refunded"

        paid = client.patch(f"/orders/{order_id}/payment-status", json={"payment_status": "paid"})
        assert paid.json()["payment_status"] == "paid"

    def test_listing_routes(self, client, customer, order_payload):
        order_id = client.post("/orders", json=order_payload(customer.id)).json()["id"]

        assert client.get("/orders").json()["total"] == 1
        assert client.get(f"/orders/customer/{customer.id}").json()["data"][0]["id"] == order_id
        assert client.get("/orders/status/pending").json()["total"] == 1
        assert client.get("/orders/payment/paid").json()["total"] == 0
        assert client.get("/orders/stats").json()["total_orders"] == 1
        assert client.get("/orders/status/bogus").status_code == 400

    def test_update_and_delete(self, client, customer, order_payload):
        order_id = client.post("/orders", json=order_payload(customer.id)).json()["id"]

        updated = client.patch(f"/orders/{order_id}", json={"tax_total": "4.00"})
        assert Decimal(str(updated.json()["tax_total"])) == Decimal("4.00")

        assert client.delete(f"/orders/{order_id}").status_code == 204
        assert client.get(f"/orders/{order_id}").status_code == 404
