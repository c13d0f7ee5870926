"""Celery notification task and database seeding."""

from kombu.exceptions import OperationalError

from storefront.data.models import ShippingMethodModel
from storefront.data.seed import DEFAULT_SHIPPING_METHODS, seed
from storefront.services.notification_service import NotificationService, send_order_notification_task


class TestNotifications:
    def test_task_runs_eagerly(self):
        result = send_order_notification_task.delay(1, 2, "processing")

        assert result.get() == {"customer_id": 1, "order_id": 2, "status": "processing", "sent": True}

    def test_service_enqueues_task(self, monkeypatch):
        sent = []
        monkeypatch.setattr(send_order_notification_task, "delay", lambda *args: sent.append(args))

        NotificationService().send_order_notification(5, 9, "completed")

        assert sent == [(5, 9, "completed")]

    def test_order_creation_notifies(self, client, customer, order_payload, monkeypatch):
        sent = []
        monkeypatch.setattr(send_order_notification_task, "delay", lambda *args: sent.append(args))

        order_id = client.post("/orders", json=order_payload(customer.id)).json()["id"]

        assert sent == [(customer.id, order_id, "pending")]

    def test_broker_outage_does_not_fail_the_request(self, client, customer, order_payload, monkeypatch):
        def unreachable(*args):
            raise OperationalError("Error 111 connecting to localhost:6379. Connection refused.")

        monkeypatch.setattr(send_order_notification_task, "delay", unreachable)

        response = client.post("/orders", json=order_payload(customer.id))

        assert response.status_code == 201
        assert client.get(f"/orders/{response.json()['id']}").status_code == 200

    def test_service_reports_dropped_notification(self, monkeypatch):
        def unreachable(*args):
            raise OperationalError("broker down")

        monkeypatch.setattr(send_order_notification_task, "delay", unreachable)

        assert NotificationService().send_order_notification(5, 9, "completed") is False


class TestSeed:
    def test_seeds_once(self, db):
        assert seed() == len(DEFAULT_SHIPPING_METHODS)
        assert seed() == 0

        names = [m.name for m in db.query(ShippingMethodModel).order_by(ShippingMethodModel.sort_order)]
        assert names == [m["name"] for m in DEFAULT_SHIPPING_METHODS]
