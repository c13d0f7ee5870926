# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import pagination_params
from storefront.data.database import get_db
from storefront.domain.schemas import (
    Page,
    PaginationParams,
    ProductCreate,
    ProductOut,
    ProductUpdate,
    StockAdjustIn,
    VariationCreate,
    VariationOut,
    VariationUpdate,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return get_service(db).create_product(payload)


@router.get("", response_model=Page[ProductOut])
def list_products(
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).list_products(params)


@router.get("/published", response_model=Page[ProductOut])
def list_published_products(
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).list_published(params)


@router.get("/search", response_model=Page[ProductOut])
def search_products(
    q: str = Query("", description="At least 2 characters"),
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).search(q, params)


@router.get("/category/{category_id}", response_model=Page[ProductOut])
def products_by_category(
    category_id: str,
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).find_by_category(category_id, params)


@router.get("/brand/{brand_id}", response_model=Page[ProductOut])
def products_by_brand(
    brand_id: int,
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).find_by_brand(brand_id, params)


@router.get("/slug/{slug}", response_model=ProductOut)
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    return get_service(db).get_by_slug(slug)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_product(product_id)


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return get_service(db).update_product(product_id, payload)


@router.patch("/{product_id}/stock", response_model=ProductOut)
def update_stock(product_id: int, payload: StockAdjustIn, db: Session = Depends(get_db)):
    return get_service(db).update_stock(product_id, payload.quantity)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_product(product_id)
    return Response(status_code=204)


@router.post("/{product_id}/variations", response_model=VariationOut, status_code=201)
def add_variation(product_id: int, payload: VariationCreate, db: Session = Depends(get_db)):
    return get_service(db).add_variation(product_id, payload)


@router.get("/{product_id}/variations", response_model=List[VariationOut])
def list_variations(product_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_variations(product_id)


@router.get("/{product_id}/variations/{variation_id}", response_model=VariationOut)
def get_variation(product_id: int, variation_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_variation(product_id, variation_id)


@router.patch("/{product_id}/variations/{variation_id}", response_model=VariationOut)
def update_variation(
    product_id: int,
    variation_id: int,
    payload: VariationUpdate,
    db: Session = Depends(get_db),
):
    return get_service(db).update_variation(product_id, variation_id, payload)


@router.delete("/{product_id}/variations/{variation_id}", status_code=204)
def delete_variation(product_id: int, variation_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_variation(product_id, variation_id)
    return Response(status_code=204)
