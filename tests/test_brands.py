"""Brands: slugs, ordering, search and the brand endpoints."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import BrandCreate, BrandUpdate, PaginationParams, ProductCreate
from storefront.services.brand_service import BrandService
from storefront.services.product_service import ProductService


@pytest.fixture()
def service(db):
    return BrandService(db)


@pytest.fixture()
def make_brand(service):
    def _make(name="Acme", slug=None, **extra):
        return service.create_brand(BrandCreate(name=name, slug=slug or name.lower(), **extra))

    return _make


class TestCreateAndUpdate:
    def test_defaults(self, make_brand):
        brand = make_brand(metadata={"tier": "gold"})

        assert brand.is_active is True
        assert brand.sort_order == 0
        assert brand.meta == {"tier": "gold"}

    def test_duplicate_slug_conflicts(self, make_brand):
        make_brand("Acme")
        with pytest.raises(ConflictError, match="slug 'acme'"):
            make_brand("ACME Corp", slug="acme")

    def test_founded_year_in_future_rejected(self, make_brand):
        with pytest.raises(ValidationFailed, match="future"):
            make_brand(founded_year=datetime.now(timezone.utc).year + 1)

    def test_founded_this_year_allowed(self, make_brand):
        year = datetime.now(timezone.utc).year
        assert make_brand(founded_year=year).founded_year == year

    def test_update_slug_conflict(self, service, make_brand):
        make_brand("Acme")
        other = make_brand("Globex")
        with pytest.raises(ConflictError):
            service.update_brand(other.id, BrandUpdate(slug="acme"))

    def test_update_keeps_own_slug(self, service, make_brand):
        brand = make_brand("Acme")

        updated = service.update_brand(brand.id, BrandUpdate(slug="acme", country="Japan"))

        assert updated.country == "Japan"

    def test_toggle_and_order(self, service, make_brand):
        brand = make_brand()

        assert service.toggle_status(brand.id).is_active is False
        assert service.toggle_status(brand.id).is_active is True
        assert service.update_order(brand.id, 4).sort_order == 4
        with pytest.raises(ValidationFailed, match="non-negative"):
            service.update_order(brand.id, -1)

    def test_delete_with_products_conflicts(self, db, service, make_brand):
        brand = make_brand()
        ProductService(db).create_product(
            ProductCreate(name="Anvil", slug="anvil", sku="AN-1", price=Decimal("50"), brand_id=brand.id)
        )

        with pytest.raises(ConflictError):
            service.delete_brand(brand.id)

    def test_delete(self, service, make_brand):
        brand = make_brand()
        service.delete_brand(brand.id)
        with pytest.raises(NotFoundError):
            service.get_brand(brand.id)


class TestQueries:
    def test_active_sorted_by_order_then_name(self, service, make_brand):
        make_brand("Zeta", sort_order=1)
        make_brand("Alpha", sort_order=1)
        make_brand("Omega", sort_order=0)
        make_brand("Hidden", is_active=False)

        assert [b.name for b in service.find_active()] == ["Omega", "Alpha", "Zeta"]

    def test_by_country_skips_inactive(self, service, make_brand):
        make_brand("Sony", country="Japan")
        make_brand("Casio", country="Japan")
        make_brand("Old", country="Japan", is_active=False)
        make_brand("Bosch", country="Germany")

        assert [b.name for b in service.find_by_country("japan")] == ["Casio", "Sony"]

    def test_search(self, service, make_brand):
        make_brand("Sony", description="Electronics", country="Japan")
        make_brand("Bosch", description="Power tools", country="Germany")
        make_brand("Retired", description="Old electronics", is_active=False)

        assert [b.name for b in service.search("  ELECTRO ")] == ["Sony"]
        assert [b.name for b in service.search("germ")] == ["Bosch"]

    def test_search_needs_two_characters(self, service):
        with pytest.raises(ValidationFailed, match="at least 2"):
            service.search(" a ")

    def test_stats(self, service, make_brand):
        make_brand("Sony", country="Japan")
        make_brand("Casio", country="Japan", is_active=False)
        make_brand("Bosch", country="Germany")
        make_brand("Nameless")

        assert service.get_stats() == {
            "total_brands": 4,
            "active_brands": 3,
            "countries": ["Germany", "Japan"],
        }

    def test_by_slug_and_listing(self, service, make_brand):
        brand = make_brand("Acme")

        assert service.get_by_slug("acme").id == brand.id
        assert service.list_brands(PaginationParams())["total"] == 1
        with pytest.raises(NotFoundError):
            service.get_by_slug("missing")


class TestBrandsAPI:
    def _create(self, client, **overrides):
        body = {"name": "Acme", "slug": "acme", "country": "USA"}
        body.update(overrides)
        return client.post("/brands", json=body)

    def test_create_returns_201(self, client):
        response = self._create(client, metadata={"tier": "gold"})

        assert response.status_code == 201
        assert response.json()["metadata"] == {"tier": "gold"}

    def test_duplicate_slug_returns_409(self, client):
        self._create(client)
        assert self._create(client, name="Other").status_code == 409

    def test_bad_slug_returns_400(self, client):
        assert self._create(client, slug="Not A Slug").status_code == 400

    def test_lookup_routes(self, client):
        brand_id = self._create(client).json()["id"]
        self._create(client, name="Globex", slug="globex", country="Canada", is_active=False)

        assert client.get(f"/brands/{brand_id}").json()["slug"] == "acme"
        assert client.get("/brands/slug/acme").json()["id"] == brand_id
        assert client.get("/brands").json()["total"] == 2
        assert [b["slug"] for b in client.get("/brands/active").json()] == ["acme"]
        assert [b["slug"] for b in client.get("/brands/country/usa").json()] == ["acme"]
        assert [b["slug"] for b in client.get("/brands/search", params={"q": "acm"}).json()] == ["acme"]
        assert client.get("/brands/search", params={"q": "a"}).status_code == 400
        assert client.get("/brands/stats").json()["countries"] == ["Canada", "USA"]
        assert client.get("/brands/999").status_code == 404

    def test_update_toggle_order_delete(self, client):
        brand_id = self._create(client).json()["id"]

        assert client.patch(f"/brands/{brand_id}", json={"description": "Anvils"}).json()["description"] == "Anvils"
        assert client.patch(f"/brands/{brand_id}/toggle-status").json()["is_active"] is False
        assert client.patch(f"/brands/{brand_id}/order", json={"sort_order": 3}).json()["sort_order"] == 3
        assert client.patch(f"/brands/{brand_id}/order", json={"sort_order": -2}).status_code == 400
        assert client.delete(f"/brands/{brand_id}").status_code == 204
        assert client.get(f"/brands/{brand_id}").status_code == 404
