# storefront/repos/brand_repo.py
from typing import Any, Dict, List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from storefront.data.models.brand import BrandModel
from storefront.domain.schemas import PaginationParams
from storefront.repos.pagination import paginate


class BrandRepo:
    def __init__(self, db: Session):
        self.db = db

    #query
    def get_brand(self, brand_id: int) -> BrandModel | None:
        return self.db.get(BrandModel, brand_id)

    def get_by_slug(self, slug: str) -> BrandModel | None:
        return self.db.execute(
            select(BrandModel).where(BrandModel.slug == slug)
        ).scalar_one_or_none()

    def list_brands(self, params: PaginationParams) -> Dict[str, Any]:
        return paginate(self.db, select(BrandModel), BrandModel, params)

    def find_active(self) -> List[BrandModel]:
        stmt = (
            select(BrandModel)
            .where(BrandModel.is_active.is_(True))
            .order_by(BrandModel.sort_order, BrandModel.name)
        )
        return list(self.db.scalars(stmt).all())

    def find_by_country(self, country: str) -> List[BrandModel]:
        stmt = (
            select(BrandModel)
            .where(
                BrandModel.is_active.is_(True),
                func.lower(BrandModel.country) == country.strip().lower(),
            )
            .order_by(BrandModel.name)
        )
        return list(self.db.scalars(stmt).all())

    def search(self, query: str) -> List[BrandModel]:
        pattern = f"%{query}%"
        stmt = (
            select(BrandModel)
            .where(
                BrandModel.is_active.is_(True),
                or_(
                    BrandModel.name.ilike(pattern),
                    BrandModel.description.ilike(pattern),
                    BrandModel.country.ilike(pattern),
                ),
            )
            .order_by(BrandModel.sort_order, BrandModel.name)
        )
        return list(self.db.scalars(stmt).all())

    def get_stats(self) -> Dict[str, Any]:
        total = self.db.scalar(select(func.count(BrandModel.id))) or 0
        active = self.db.scalar(
            select(func.count(BrandModel.id)).where(BrandModel.is_active.is_(True))
        ) or 0
        countries = self.db.scalars(
            select(BrandModel.country)
            .where(BrandModel.country.is_not(None), BrandModel.country != "")
            .distinct()
            .order_by(BrandModel.country)
        ).all()
        return {"total_brands": total, "active_brands": active, "countries": list(countries)}

    #commands
    def create_brand(self, brand: BrandModel) -> BrandModel:
        self.db.add(brand)
        self.db.commit()
        self.db.refresh(brand)
        return brand

    def update_brand(self, brand: BrandModel, data: Dict[str, Any]) -> BrandModel:
        for field, value in data.items():
            setattr(brand, field, value)
        self.db.commit()
        self.db.refresh(brand)
        return brand

    def delete_brand(self, brand: BrandModel) -> None:
        self.db.delete(brand)
        self.db.commit()
