# storefront/repos/product_repo.py
from typing import Any, Dict, List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.product_category import ProductCategoryModel
from storefront.data.models.product_variation import ProductVariationModel
from storefront.domain.enums import ProductStatus
from storefront.domain.schemas import PaginationParams
from storefront.repos.pagination import paginate


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    #query
    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_by_slug(self, slug: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.slug == slug)
        ).scalar_one_or_none()

    def get_by_sku(self, sku: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.sku == sku)
        ).scalar_one_or_none()

    def list_products(self, params: PaginationParams, published_only: bool = False, **filters) -> Dict[str, Any]:
        stmt = select(ProductModel).filter_by(**filters)
        if published_only:
            stmt = stmt.where(ProductModel.status == ProductStatus.PUBLISHED.value)
        return paginate(self.db, stmt, ProductModel, params)

    def search(self, query: str, params: PaginationParams) -> Dict[str, Any]:
        pattern = f"%{query}%"
        stmt = select(ProductModel).where(
            ProductModel.status == ProductStatus.PUBLISHED.value,
            or_(
                ProductModel.name.ilike(pattern),
                ProductModel.description.ilike(pattern),
                ProductModel.short_description.ilike(pattern),
                ProductModel.sku.ilike(pattern),
            ),
        )
        return paginate(self.db, stmt, ProductModel, params)

    def list_by_category(self, category_id: str, params: PaginationParams) -> Dict[str, Any]:
        stmt = select(ProductModel).where(
            ProductModel.categories.any(ProductCategoryModel.category_id == category_id)
        )
        return paginate(self.db, stmt, ProductModel, params)

    def count_by_brand(self, brand_id: int) -> int:
        return self.db.scalar(
            select(func.count(ProductModel.id)).where(ProductModel.brand_id == brand_id)
        ) or 0

    def get_variation(self, product_id: int, variation_id: int) -> ProductVariationModel | None:
        return self.db.execute(
            select(ProductVariationModel).where(
                ProductVariationModel.id == variation_id,
                ProductVariationModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    #commands
    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_product(
        self,
        product: ProductModel,
        data: Dict[str, Any],
        category_ids: List[str] | None = None,
    ) -> ProductModel:
        for field, value in data.items():
            setattr(product, field, value)
        if category_ids is not None:
            # delete-orphan drops the previous links
            product.categories = [ProductCategoryModel(category_id=c) for c in category_ids]
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def add_variation(self, product: ProductModel, variation: ProductVariationModel) -> ProductVariationModel:
        product.variations.append(variation)
        self.db.commit()
        self.db.refresh(variation)
        return variation

    def save_variation(self, variation: ProductVariationModel) -> ProductVariationModel:
        self.db.commit()
        self.db.refresh(variation)
        return variation

    def delete_variation(self, variation: ProductVariationModel) -> None:
        self.db.delete(variation)
        self.db.commit()
