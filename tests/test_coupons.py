"""Coupon evaluation, usage accounting and the coupon endpoints."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.enums import DiscountType
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import CouponCreate, CouponUpdate
from storefront.services.coupon_service import CouponService, compute_discount


@pytest.fixture()
def service(db):
    return CouponService(db)


@pytest.fixture()
def make_coupon(service):
    def _make(code="SAVE10", discount_type=DiscountType.FIXED_CART, amount="10", **extra):
        return service.create_coupon(
            CouponCreate(code=code, discount_type=discount_type, amount=Decimal(amount), **extra)
        )

    return _make


def _yesterday():
    return datetime.now(timezone.utc) - timedelta(days=1)


def _next_week():
    return datetime.now(timezone.utc) + timedelta(days=7)


class TestComputeDiscount:
    def test_fixed_cart(self):
        assert compute_discount("fixed_cart", Decimal("10"), Decimal("50")) == Decimal("10.00")

    def test_fixed_cart_is_capped_at_cart_total(self):
        assert compute_discount("fixed_cart", Decimal("10"), Decimal("5")) == Decimal("5.00")

    def test_percent_rounds_half_up_to_cents(self):
        assert compute_discount("percent", Decimal("15"), Decimal("33.33")) == Decimal("5.00")
        assert compute_discount("percent", Decimal("10"), Decimal("0.05")) == Decimal("0.01")

    def test_fixed_product_is_flat(self):
        assert compute_discount("fixed_product", Decimal("7"), Decimal("3")) == Decimal("7.00")


class TestCreateAndUpdate:
    def test_code_is_stored_uppercase(self, make_coupon):
        assert make_coupon(code="summer").code == "SUMMER"

    def test_duplicate_code_ignores_case(self, make_coupon):
        make_coupon(code="SUMMER")
        with pytest.raises(ConflictError):
            make_coupon(code="summer")

    def test_percent_over_100_rejected(self, make_coupon):
        with pytest.raises(ValidationFailed):
            make_coupon(discount_type=DiscountType.PERCENT, amount="100.01")

    def test_percent_of_exactly_100_allowed(self, make_coupon):
        assert Decimal(str(make_coupon(discount_type=DiscountType.PERCENT, amount="100").amount)) == 100

    def test_minimum_spend_must_be_below_maximum(self, make_coupon):
        with pytest.raises(ValidationFailed):
            make_coupon(minimum_spend=Decimal("50"), maximum_spend=Decimal("50"))

    def test_update_percent_over_100_rejected(self, service, make_coupon):
        coupon = make_coupon(discount_type=DiscountType.PERCENT, amount="20")
        with pytest.raises(ValidationFailed):
            service.update_coupon(coupon.id, CouponUpdate(amount=Decimal("150")))

    def test_switching_to_percent_checks_existing_amount(self, service, make_coupon):
        coupon = make_coupon(amount="120")
        with pytest.raises(ValidationFailed):
            service.update_coupon(coupon.id, CouponUpdate(discount_type=DiscountType.PERCENT))

    def test_update_spend_range_uses_stored_values(self, service, make_coupon):
        coupon = make_coupon(minimum_spend=Decimal("20"))
        with pytest.raises(ValidationFailed):
            service.update_coupon(coupon.id, CouponUpdate(maximum_spend=Decimal("10")))

    def test_update_code_conflict(self, service, make_coupon):
        make_coupon(code="FIRST")
        second = make_coupon(code="SECOND")
        with pytest.raises(ConflictError):
            service.update_coupon(second.id, CouponUpdate(code="first"))

    def test_update_fields(self, service, make_coupon):
        coupon = make_coupon()
        updated = service.update_coupon(coupon.id, CouponUpdate(description="Spring sale", usage_limit=3))
        assert updated.description == "Spring sale"
        assert updated.usage_limit == 3
        assert updated.code == "SAVE10"

    def test_usage_limit_cannot_drop_below_usage_count(self, service, make_coupon):
        coupon = make_coupon(usage_limit=5)
        for _ in range(3):
            service.apply("SAVE10")

        with pytest.raises(ValidationFailed, match="usage count of 3"):
            service.update_coupon(coupon.id, CouponUpdate(usage_limit=2))

        assert service.update_coupon(coupon.id, CouponUpdate(usage_limit=3)).usage_limit == 3
        assert service.update_coupon(coupon.id, CouponUpdate(usage_limit=None)).usage_limit is None


class TestValidate:
    def test_valid_fixed_cart(self, service, make_coupon):
        make_coupon()

        result = service.validate("save10", Decimal("50"))

        assert result["is_valid"] is True
        assert result["discount_amount"] == Decimal("10.00")
        assert result["coupon"].code == "SAVE10"

    def test_fixed_cart_capped(self, service, make_coupon):
        make_coupon()
        assert service.validate("SAVE10", Decimal("5"))["discount_amount"] == Decimal("5.00")

    def test_unknown_code(self, service):
        result = service.validate("NOPE", Decimal("10"))
        assert result == {
            "is_valid": False,
            "discount_amount": Decimal("0.00"),
            "message": "Coupon not found",
            "coupon": None,
        }

    def test_expired(self, service, make_coupon):
        make_coupon(expiry_date=_yesterday())
        assert service.validate("SAVE10", Decimal("50"))["message"] == "Coupon has expired"

    def test_not_yet_expired(self, service, make_coupon):
        make_coupon(expiry_date=_next_week())
        assert service.validate("SAVE10", Decimal("50"))["is_valid"] is True

    def test_checks_run_in_order(self, service, make_coupon):
        # expired, under minimum spend and excluded at once: expiry is reported
        make_coupon(
            expiry_date=_yesterday(),
            minimum_spend=Decimal("100"),
            excluded_product_ids=["P1"],
        )
        assert service.validate("SAVE10", Decimal("10"), ["P1"])["message"] == "Coupon has expired"

    def test_usage_limit_before_spend(self, service, make_coupon):
        make_coupon(usage_limit=1, minimum_spend=Decimal("100"))
        service.apply("SAVE10")
        assert service.validate("SAVE10", Decimal("10"))["message"] == "Coupon usage limit exceeded"

    def test_minimum_spend(self, service, make_coupon):
        make_coupon(minimum_spend=Decimal("30"))
        result = service.validate("SAVE10", Decimal("29.99"))
        assert result["is_valid"] is False
        assert result["message"].startswith("Minimum spend")

    def test_maximum_spend(self, service, make_coupon):
        make_coupon(maximum_spend=Decimal("30"))
        assert service.validate("SAVE10", Decimal("30.01"))["message"].startswith("Maximum spend")

    def test_inclusion_list(self, service, make_coupon):
        make_coupon(product_ids=["P1", "P2"])

        assert service.validate("SAVE10", Decimal("50"), ["P2", "P9"])["is_valid"] is True
        assert service.validate("SAVE10", Decimal("50"), ["P9"])["is_valid"] is False
        assert service.validate("SAVE10", Decimal("50"), [])["is_valid"] is False

    def test_exclusion_list(self, service, make_coupon):
        make_coupon(excluded_product_ids=["P3"])

        result = service.validate("SAVE10", Decimal("50"), ["P1", "P3"])

        assert result["is_valid"] is False
        assert result["message"] == "Coupon cannot be used with excluded products"

    def test_percent_discount(self, service, make_coupon):
        make_coupon(code="TENPCT", discount_type=DiscountType.PERCENT, amount="10")
        assert service.validate("TENPCT", Decimal("80"))["discount_amount"] == Decimal("8.00")


class TestApply:
    def test_limit_allows_n_and_rejects_the_next(self, service, make_coupon):
        make_coupon(usage_limit=3)

        for expected in (1, 2, 3):
            assert service.apply("save10").usage_count == expected

        with pytest.raises(ValidationFailed, match="usage limit"):
            service.apply("SAVE10")
        assert service.get_by_code("SAVE10").usage_count == 3

    def test_unlimited_coupon(self, service, make_coupon):
        make_coupon()
        for _ in range(5):
            coupon = service.apply("SAVE10")
        assert coupon.usage_count == 5

    def test_expired_coupon_cannot_be_applied(self, service, make_coupon):
        make_coupon(expiry_date=_yesterday())
        with pytest.raises(ValidationFailed, match="expired"):
            service.apply("SAVE10")

    def test_unknown_code(self, service):
        with pytest.raises(NotFoundError):
            service.apply("NOPE")


class TestQueries:
    def test_find_valid_skips_expired_and_used_up(self, service, make_coupon):
        make_coupon(code="OK")
        make_coupon(code="OLD", expiry_date=_yesterday())
        make_coupon(code="ONCE", usage_limit=1)
        make_coupon(code="LATER", expiry_date=_next_week())
        service.apply("ONCE")

        assert [c.code for c in service.find_valid_coupons()] == ["OK", "LATER"]

    def test_find_by_product(self, service, make_coupon):
        make_coupon(code="ANY")
        make_coupon(code="ONLY_P1", product_ids=["P1"])
        make_coupon(code="NOT_P1", excluded_product_ids=["P1"])

        assert [c.code for c in service.find_coupons_by_product("P1")] == ["ANY", "ONLY_P1"]
        assert [c.code for c in service.find_coupons_by_product("P2")] == ["ANY", "NOT_P1"]

    def test_delete(self, service, make_coupon):
        coupon = make_coupon()
        service.delete_coupon(coupon.id)
        with pytest.raises(NotFoundError):
            service.get_coupon(coupon.id)


class TestCouponsAPI:
    def _create(self, client, **overrides):
        body = {"code": "welcome", "discount_type": "percent", "amount": "15"}
        body.update(overrides)
        return client.post("/coupons", json=body)

    def test_create_returns_201(self, client):
        response = self._create(client)
        assert response.status_code == 201
        assert response.json()["code"] == "WELCOME"
        assert response.json()["usage_count"] == 0

    def test_create_duplicate_returns_409(self, client):
        self._create(client)
        assert self._create(client, code="Welcome").status_code == 409

    def test_percent_over_100_returns_400(self, client):
        assert self._create(client, amount="101").status_code == 400

    def test_unknown_discount_type_returns_400(self, client):
        assert self._create(client, discount_type="bogus").status_code == 400

    def test_list_is_paginated(self, client):
        for code in ("A1", "A2", "A3"):
            self._create(client, code=code)

        page = client.get("/coupons", params={"page": 2, "limit": 2}).json()

        assert page["total"] == 3
        assert page["total_pages"] == 2
        assert page["page"] == 2
        assert len(page["data"]) == 1

    def test_lookup_routes(self, client):
        created = self._create(client, product_ids=["P1"]).json()

        assert client.get(f"/coupons/{created['id']}").json()["code"] == "WELCOME"
        assert client.get("/coupons/code/welcome").json()["id"] == created["id"]
        assert [c["id"] for c in client.get("/coupons/valid").json()] == [created["id"]]
        assert [c["id"] for c in client.get("/coupons/product/P1").json()] == [created["id"]]
        assert client.get("/coupons/product/P2").json() == []
        assert client.get("/coupons/code/missing").status_code == 404

    def test_validate_endpoint(self, client):
        self._create(client, code="FLAT10", discount_type="fixed_cart", amount="10")

        response = client.post("/coupons/validate", json={"code": "flat10", "cart_total": "5"})

        body = response.json()
        assert response.status_code == 200
        assert body["is_valid"] is True
        assert Decimal(str(body["discount_amount"])) == Decimal("5.00")
        assert body["coupon"]["code"] == "FLAT10"

    def test_apply_until_exhausted(self, client):
        self._create(client, usage_limit=2)

        assert client.post("/coupons/apply/WELCOME").json()["usage_count"] == 1
        assert client.post("/coupons/apply/WELCOME").json()["usage_count"] == 2

        rejected = client.post("/coupons/apply/WELCOME")
        assert rejected.status_code == 400
        assert rejected.json()["detail"] == "Coupon usage limit exceeded"

    def test_update_and_delete(self, client):
        created = self._create(client).json()

        updated = client.patch(f"/coupons/{created['id']}", json={"amount": "20"})
        assert Decimal(str(updated.json()["amount"])) == Decimal("20")

        assert client.patch(f"/coupons/{created['id']}", json={"amount": "200"}).status_code == 400
        assert client.delete(f"/coupons/{created['id']}").status_code == 204
        assert client.get(f"/coupons/{created['id']}").status_code == 404

    def test_usage_limit_below_usage_count_returns_400(self, client):
        created = self._create(client, usage_limit=3).json()
        client.post("/coupons/apply/WELCOME")
        client.post("/coupons/apply/WELCOME")

        response = client.patch(f"/coupons/{created['id']}", json={"usage_limit": 1})

        assert response.status_code == 400
        assert client.get(f"/coupons/{created['id']}").json()["usage_limit"] == 3
