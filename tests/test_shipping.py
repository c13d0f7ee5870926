"""Shipping methods and quote calculation."""

from decimal import Decimal

import pytest

from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import ShippingMethodCreate, ShippingMethodUpdate
from storefront.services.shipping_service import ShippingService


@pytest.fixture()
def service(db):
    return ShippingService(db)


@pytest.fixture()
def make_method(service):
    def _make(name, cost, **extra):
        return service.create_method(ShippingMethodCreate(name=name, cost=Decimal(cost), **extra))

    return _make


class TestShippingService:
    def test_duplicate_name_conflicts(self, make_method):
        make_method("Standard", "5.00")
        with pytest.raises(ConflictError):
            make_method("Standard", "6.00")

    def test_min_above_max_rejected(self, make_method):
        with pytest.raises(ValidationFailed):
            make_method("Odd", "1.00", minimum_order_amount=Decimal("50"), maximum_order_amount=Decimal("10"))

    def test_listing_order(self, service, make_method):
        make_method("Zeta", "1.00", sort_order=1)
        make_method("Alpha", "1.00", sort_order=1)
        make_method("First", "1.00", sort_order=0, enabled=False)

        assert [m.name for m in service.list_methods()] == ["First", "Alpha", "Zeta"]
        assert [m.name for m in service.list_active()] == ["Alpha", "Zeta"]

    def test_toggle(self, service, make_method):
        method = make_method("Standard", "5.00")
        assert service.toggle(method.id, False).enabled is False
        assert service.list_active() == []

    def test_update_name_conflict(self, service, make_method):
        make_method("Standard", "5.00")
        express = make_method("Express", "15.00")
        with pytest.raises(ConflictError):
            service.update_method(express.id, ShippingMethodUpdate(name="Standard"))

    def test_update_checks_range_against_stored_values(self, service, make_method):
        method = make_method("Standard", "5.00", minimum_order_amount=Decimal("20"))
        with pytest.raises(ValidationFailed):
            service.update_method(method.id, ShippingMethodUpdate(maximum_order_amount=Decimal("10")))

    def test_calculate_cheapest_first(self, service, make_method):
        make_method("Express", "15.00", estimated_delivery_days=1)
        make_method("Standard", "5.00", description="Ground")
        make_method("Free", "0.00", minimum_order_amount=Decimal("100"))

        quote = service.calculate(Decimal("40"))

        assert [m["name"] for m in quote["available_methods"]] == ["Standard", "Express"]
        assert quote["total_cost"] == Decimal("5.00")
        assert quote["currency"] == "USD"
        assert quote["available_methods"][0]["estimated_days"] == 3
        assert quote["available_methods"][0]["description"] == "Ground"
        assert quote["available_methods"][1]["description"] == ""

        assert service.calculate(Decimal("100"))["total_cost"] == Decimal("0.00")

    def test_calculate_respects_maximum(self, service, make_method):
        make_method("Small parcel", "3.00", maximum_order_amount=Decimal("50"))
        with pytest.raises(ValidationFailed):
            service.calculate(Decimal("75"))

    def test_calculate_without_amount_lists_every_enabled_method(self, service, make_method):
        make_method("Free", "0.00", minimum_order_amount=Decimal("100"))
        assert len(service.calculate()["available_methods"]) == 1

    def test_delete(self, service, make_method):
        method = make_method("Standard", "5.00")
        service.delete_method(method.id)
        with pytest.raises(NotFoundError):
            service.get_method(method.id)


class TestShippingAPI:
    def test_routes(self, client):
        created = client.post("/shipping", json={"name": "Standard", "cost": "5.00"})
        assert created.status_code == 201
        method_id = created.json()["id"]

        assert client.post("/shipping", json={"name": "Standard", "cost": "1.00"}).status_code == 409
        assert client.get(f"/shipping/{method_id}").json()["tax_status"] == "taxable"
        assert len(client.get("/shipping").json()) == 1
        assert len(client.get("/shipping/active").json()) == 1

        quote = client.post("/shipping/calculate", json={"order_amount": "20"}).json()
        assert Decimal(str(quote["total_cost"])) == Decimal("5.00")

        updated = client.patch(f"/shipping/{method_id}", json={"cost": "6.50"})
        assert Decimal(str(updated.json()["cost"])) == Decimal("6.50")

        toggled = client.patch(f"/shipping/{method_id}/toggle", json={"enabled": False})
        assert toggled.json()["enabled"] is False
        assert client.post("/shipping/calculate", json={}).status_code == 400

        assert client.delete(f"/shipping/{method_id}").status_code == 204
        assert client.get(f"/shipping/{method_id}").status_code == 404
