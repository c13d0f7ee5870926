# storefront/api/routers/brands.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import pagination_params
from storefront.data.database import get_db
from storefront.domain.schemas import (
    BrandCreate,
    BrandOrderIn,
    BrandOut,
    BrandStatsOut,
    BrandUpdate,
    Page,
    PaginationParams,
)
from storefront.services.brand_service import BrandService

router = APIRouter(prefix="/brands", tags=["brands"])


def get_service(db: Session):
    return BrandService(db)


@router.post("", response_model=BrandOut, status_code=201)
def create_brand(payload: BrandCreate, db: Session = Depends(get_db)):
    return get_service(db).create_brand(payload)


@router.get("", response_model=Page[BrandOut])
def list_brands(
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).list_brands(params)


@router.get("/active", response_model=List[BrandOut])
def list_active_brands(db: Session = Depends(get_db)):
    return get_service(db).find_active()


@router.get("/stats", response_model=BrandStatsOut)
def brand_stats(db: Session = Depends(get_db)):
    return get_service(db).get_stats()


@router.get("/search", response_model=List[BrandOut])
def search_brands(q: str = Query("", description="At least 2 characters"), db: Session = Depends(get_db)):
    return get_service(db).search(q)


@router.get("/country/{country}", response_model=List[BrandOut])
def brands_by_country(country: str, db: Session = Depends(get_db)):
    return get_service(db).find_by_country(country)


@router.get("/slug/{slug}", response_model=BrandOut)
def get_brand_by_slug(slug: str, db: Session = Depends(get_db)):
    return get_service(db).get_by_slug(slug)


@router.get("/{brand_id}", response_model=BrandOut)
def get_brand(brand_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_brand(brand_id)


@router.patch("/{brand_id}", response_model=BrandOut)
def update_brand(brand_id: int, payload: BrandUpdate, db: Session = Depends(get_db)):
    return get_service(db).update_brand(brand_id, payload)


@router.patch("/{brand_id}/toggle-status", response_model=BrandOut)
def toggle_brand_status(brand_id: int, db: Session = Depends(get_db)):
    return get_service(db).toggle_status(brand_id)


@router.patch("/{brand_id}/order", response_model=BrandOut)
def update_brand_order(brand_id: int, payload: BrandOrderIn, db: Session = Depends(get_db)):
    return get_service(db).update_order(brand_id, payload.sort_order)


@router.delete("/{brand_id}", status_code=204)
def delete_brand(brand_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_brand(brand_id)
    return Response(status_code=204)
