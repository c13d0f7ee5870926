# storefront/services/brand_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.brand import BrandModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import BrandCreate, BrandUpdate, PaginationParams
from storefront.repos.brand_repo import BrandRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MIN_SEARCH_LENGTH = 2


class BrandService:
    def __init__(self, db: Session):
        self.repo = BrandRepo(db)
        self.products = ProductRepo(db)

    #query
    def get_brand(self, brand_id: int) -> BrandModel:
        brand = self.repo.get_brand(brand_id)
        if not brand:
            raise NotFoundError(f"Brand with ID {brand_id} not found")
        return brand

    def get_by_slug(self, slug: str) -> BrandModel:
        brand = self.repo.get_by_slug(slug)
        if not brand:
            raise NotFoundError(f"Brand with slug '{slug}' not found")
        return brand

    def list_brands(self, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_brands(params)

    def find_active(self) -> List[BrandModel]:
        return self.repo.find_active()

    def find_by_country(self, country: str) -> List[BrandModel]:
        return self.repo.find_by_country(country)

    def search(self, query: str | None) -> List[BrandModel]:
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            raise ValidationFailed("Search query must be at least 2 characters long")
        return self.repo.search(query)

    def get_stats(self) -> Dict[str, Any]:
        return self.repo.get_stats()

    #commands
    def create_brand(self, payload: BrandCreate) -> BrandModel:
        if self.repo.get_by_slug(payload.slug):
            raise ConflictError(f"Brand with slug '{payload.slug}' already exists")
        self._check_founded_year(payload.founded_year)

        data = payload.model_dump(exclude={"metadata"})
        created = self.repo.create_brand(BrandModel(meta=payload.metadata, **data))
        logger.info(f"Created brand {created.slug}")
        return created

    def update_brand(self, brand_id: int, payload: BrandUpdate) -> BrandModel:
        brand = self.get_brand(brand_id)
        data = payload.model_dump(exclude_unset=True)
        for required in ("name", "slug", "is_active", "sort_order"):
            if data.get(required, False) is None:
                data.pop(required)

        if "slug" in data:
            existing = self.repo.get_by_slug(data["slug"])
            if existing and existing.id != brand.id:
                raise ConflictError(f"Brand with slug '{data['slug']}' already exists")

        if "founded_year" in data:
            self._check_founded_year(data["founded_year"])

        if "metadata" in data:
            data["meta"] = data.pop("metadata")

        return self.repo.update_brand(brand, data)

    def toggle_status(self, brand_id: int) -> BrandModel:
        brand = self.get_brand(brand_id)
        logger.info(f"Brand {brand.slug} is_active={not brand.is_active}")
        return self.repo.update_brand(brand, {"is_active": not brand.is_active})

    def update_order(self, brand_id: int, sort_order: int) -> BrandModel:
        if sort_order < 0:
            raise ValidationFailed("Sort order must be non-negative")
        brand = self.get_brand(brand_id)
        return self.repo.update_brand(brand, {"sort_order": sort_order})

    def delete_brand(self, brand_id: int) -> None:
        brand = self.get_brand(brand_id)
        if self.products.count_by_brand(brand_id):
            raise ConflictError(f"Brand with ID {brand_id} still has products")

        self.repo.delete_brand(brand)
        logger.info(f"Deleted brand {brand_id}")

    #helpers
    @staticmethod
    def _check_founded_year(year: int | None) -> None:
        if year is not None and year > datetime.now(timezone.utc).year:
            raise ValidationFailed("Founded year cannot be in the future")
