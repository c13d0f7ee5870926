# storefront/services/product_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.product_category import ProductCategoryModel
from storefront.data.models.product_variation import ProductVariationModel
from storefront.domain.enums import StockStatus
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import (
    PaginationParams,
    ProductCreate,
    ProductUpdate,
    VariationCreate,
    VariationUpdate,
)
from storefront.repos.brand_repo import BrandRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.money import to_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MIN_SEARCH_LENGTH = 2


def stock_status_for(quantity: int, allow_backorders: bool) -> str:
    if quantity > 0:
        return StockStatus.INSTOCK.value
    if allow_backorders:
        return StockStatus.ONBACKORDER.value
    return StockStatus.OUTOFSTOCK.value


class ProductService:
    """
    Catalogue products and their variations.

    With manage_stock on, stock_status follows stock_quantity:
        quantity > 0        -> instock
        0 and backorders    -> onbackorder
        0, no backorders    -> outofstock
    Without it, stock_status is whatever was last set.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.brands = BrandRepo(db)

    #query
    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    def get_by_slug(self, slug: str) -> ProductModel:
        product = self.repo.get_by_slug(slug)
        if not product:
            raise NotFoundError(f"Product with slug '{slug}' not found")
        return product

    def list_products(self, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_products(params)

    def list_published(self, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_products(params, published_only=True)

    def find_by_category(self, category_id: str, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_by_category(category_id, params)

    def find_by_brand(self, brand_id: int, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_products(params, published_only=True, brand_id=brand_id)

    def search(self, query: str | None, params: PaginationParams) -> Dict[str, Any]:
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            raise ValidationFailed("Search query must be at least 2 characters long")
        return self.repo.search(query, params)

    #commands
    def create_product(self, payload: ProductCreate) -> ProductModel:
        self._check_unique(payload.slug, payload.sku)
        self._check_sale_price(payload.sale_price, payload.price)
        if payload.brand_id is not None:
            self._require_brand(payload.brand_id)

        data = payload.model_dump(exclude={"category_ids", "images"})
        data["status"] = payload.status.value
        data["stock_status"] = payload.stock_status.value
        if payload.manage_stock:
            data["stock_status"] = stock_status_for(payload.stock_quantity, payload.allow_backorders)

        product = ProductModel(
            images=[image.model_dump() for image in payload.images],
            categories=[ProductCategoryModel(category_id=c) for c in dict.fromkeys(payload.category_ids)],
            **data,
        )
        created = self.repo.create_product(product)
        logger.info(f"Created product {created.sku} ({created.price})")
        return created

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        data = payload.model_dump(exclude_unset=True)
        for required in ("name", "slug", "sku", "price", "status", "manage_stock",
                         "stock_quantity", "stock_status", "allow_backorders", "images", "category_ids"):
            if data.get(required, False) is None:
                data.pop(required)

        self._check_unique(data.get("slug"), data.get("sku"), product.id)

        if "sale_price" in data or "price" in data:
            self._check_sale_price(
                data["sale_price"] if "sale_price" in data else product.sale_price,
                data.get("price", product.price),
            )

        if data.get("brand_id") is not None:
            self._require_brand(data["brand_id"])

        for enum_field in ("status", "stock_status"):
            if enum_field in data:
                data[enum_field] = data[enum_field].value

        manage_stock = data.get("manage_stock", product.manage_stock)
        if "stock_quantity" in data and manage_stock:
            data["stock_status"] = stock_status_for(
                data["stock_quantity"],
                data.get("allow_backorders", product.allow_backorders),
            )

        if "images" in data:
            data["images"] = [dict(image) for image in data["images"]]

        category_ids = data.pop("category_ids", None)
        if category_ids is not None:
            category_ids = list(dict.fromkeys(category_ids))

        logger.info(f"Updating product {product.sku}: {sorted(data)}")
        return self.repo.update_product(product, data, category_ids)

    def update_stock(self, product_id: int, quantity: int) -> ProductModel:
        """Adds ``quantity`` (may be negative); stored stock never drops below zero."""
        product = self.get_product(product_id)
        if not product.manage_stock:
            raise ValidationFailed("Stock management is not enabled for this product")

        new_quantity = product.stock_quantity + quantity
        logger.info(f"Stock of product {product.sku}: {product.stock_quantity} {quantity:+d}")
        return self.repo.update_product(
            product,
            {
                "stock_quantity": max(0, new_quantity),
                "stock_status": stock_status_for(new_quantity, product.allow_backorders),
            },
        )

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        self.repo.delete_product(product)
        logger.info(f"Deleted product {product_id}")

    #variations
    def list_variations(self, product_id: int) -> List[ProductVariationModel]:
        return list(self.get_product(product_id).variations)

    def get_variation(self, product_id: int, variation_id: int) -> ProductVariationModel:
        variation = self.repo.get_variation(product_id, variation_id)
        if not variation:
            raise NotFoundError(f"Variation with ID {variation_id} of product {product_id} not found")
        return variation

    def add_variation(self, product_id: int, payload: VariationCreate) -> ProductVariationModel:
        product = self.get_product(product_id)
        self._check_sale_price(payload.sale_price, payload.price)

        variation = ProductVariationModel(
            stock_status=self._variation_stock_status(payload.stock_quantity),
            **payload.model_dump(),
        )
        created = self.repo.add_variation(product, variation)
        logger.info(f"Added variation {created.id} to product {product.sku}")
        return created

    def update_variation(self, product_id: int, variation_id: int, payload: VariationUpdate) -> ProductVariationModel:
        variation = self.get_variation(product_id, variation_id)
        data = payload.model_dump(exclude_unset=True)
        for required in ("price", "stock_quantity", "attributes"):
            if data.get(required, False) is None:
                data.pop(required)

        if "sale_price" in data or "price" in data:
            self._check_sale_price(
                data["sale_price"] if "sale_price" in data else variation.sale_price,
                data.get("price", variation.price),
            )

        if "stock_quantity" in data:
            data["stock_status"] = self._variation_stock_status(data["stock_quantity"])

        for field, value in data.items():
            setattr(variation, field, value)
        return self.repo.save_variation(variation)

    def delete_variation(self, product_id: int, variation_id: int) -> None:
        variation = self.get_variation(product_id, variation_id)
        self.repo.delete_variation(variation)
        logger.info(f"Deleted variation {variation_id} of product {product_id}")

    #helpers
    def _check_unique(self, slug: str | None, sku: str | None, product_id: int | None = None) -> None:
        if slug:
            existing = self.repo.get_by_slug(slug)
            if existing and existing.id != product_id:
                raise ConflictError(f"Product with slug '{slug}' already exists")
        if sku:
            existing = self.repo.get_by_sku(sku)
            if existing and existing.id != product_id:
                raise ConflictError(f"Product with SKU '{sku}' already exists")

    def _require_brand(self, brand_id: int) -> None:
        if not self.brands.get_brand(brand_id):
            raise NotFoundError(f"Brand with ID {brand_id} not found")

    @staticmethod
    def _check_sale_price(sale_price, price) -> None:
        if sale_price is not None and to_money(sale_price) >= to_money(price):
            raise ValidationFailed("Sale price must be less than regular price")

    @staticmethod
    def _variation_stock_status(quantity: int) -> str:
        # variations have no backorder state
        return StockStatus.INSTOCK.value if quantity > 0 else StockStatus.OUTOFSTOCK.value
