# storefront/api/routers/coupons.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import pagination_params
from storefront.data.database import get_db
from storefront.domain.schemas import (
    CouponCreate,
    CouponOut,
    CouponUpdate,
    CouponValidateIn,
    CouponValidationOut,
    Page,
    PaginationParams,
)
from storefront.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["coupons"])


def get_service(db: Session):
    return CouponService(db)


@router.post("", response_model=CouponOut, status_code=201)
def create_coupon(payload: CouponCreate, db: Session = Depends(get_db)):
    return get_service(db).create_coupon(payload)


@router.get("", response_model=Page[CouponOut])
def list_coupons(
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).list_coupons(params)


@router.get("/valid", response_model=List[CouponOut])
def list_valid_coupons(db: Session = Depends(get_db)):
    """Coupons that are neither expired nor used up."""
    return get_service(db).find_valid_coupons()


@router.get("/product/{product_id}", response_model=List[CouponOut])
def coupons_for_product(product_id: str, db: Session = Depends(get_db)):
    return get_service(db).find_coupons_by_product(product_id)


@router.get("/code/{code}", response_model=CouponOut)
def get_coupon_by_code(code: str, db: Session = Depends(get_db)):
    return get_service(db).get_by_code(code)


@router.post("/validate", response_model=CouponValidationOut)
def validate_coupon(payload: CouponValidateIn, db: Session = Depends(get_db)):
    return get_service(db).validate(payload.code, payload.cart_total, payload.product_ids)


@router.post("/apply/{code}", response_model=CouponOut)
def apply_coupon(code: str, db: Session = Depends(get_db)):
    return get_service(db).apply(code)


@router.get("/{coupon_id}", response_model=CouponOut)
def get_coupon(coupon_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_coupon(coupon_id)


@router.patch("/{coupon_id}", response_model=CouponOut)
def update_coupon(coupon_id: int, payload: CouponUpdate, db: Session = Depends(get_db)):
    return get_service(db).update_coupon(coupon_id, payload)


@router.delete("/{coupon_id}", status_code=204)
def delete_coupon(coupon_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_coupon(coupon_id)
    return Response(status_code=204)
