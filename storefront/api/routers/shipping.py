# storefront/api/routers/shipping.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import (
    ShippingCalculateIn,
    ShippingCalculationOut,
    ShippingMethodCreate,
    ShippingMethodOut,
    ShippingMethodUpdate,
    ShippingToggleIn,
)
from storefront.services.shipping_service import ShippingService

router = APIRouter(prefix="/shipping", tags=["shipping"])


def get_service(db: Session):
    return ShippingService(db)


@router.post("", response_model=ShippingMethodOut, status_code=201)
def create_method(payload: ShippingMethodCreate, db: Session = Depends(get_db)):
    return get_service(db).create_method(payload)


@router.get("", response_model=List[ShippingMethodOut])
def list_methods(db: Session = Depends(get_db)):
    return get_service(db).list_methods()


@router.get("/active", response_model=List[ShippingMethodOut])
def list_active_methods(db: Session = Depends(get_db)):
    return get_service(db).list_active()


@router.post("/calculate", response_model=ShippingCalculationOut)
def calculate_shipping(payload: ShippingCalculateIn, db: Session = Depends(get_db)):
    return get_service(db).calculate(payload.order_amount)


@router.get("/{method_id}", response_model=ShippingMethodOut)
def get_method(method_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_method(method_id)


@router.patch("/{method_id}", response_model=ShippingMethodOut)
def update_method(method_id: int, payload: ShippingMethodUpdate, db: Session = Depends(get_db)):
    return get_service(db).update_method(method_id, payload)


@router.patch("/{method_id}/toggle", response_model=ShippingMethodOut)
def toggle_method(method_id: int, payload: ShippingToggleIn, db: Session = Depends(get_db)):
    return get_service(db).toggle(method_id, payload.enabled)


@router.delete("/{method_id}", status_code=204)
def delete_method(method_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_method(method_id)
    return Response(status_code=204)
