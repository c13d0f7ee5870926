# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import pagination_params
from storefront.data.database import get_db
from storefront.domain.enums import PaymentState
from storefront.domain.schemas import (
    Page,
    PaginationParams,
    PaymentCreate,
    PaymentFailureIn,
    PaymentOut,
    PaymentStatsOut,
    PaymentUpdate,
    RefundIn,
)
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


def get_service(db: Session):
    return PaymentService(db)


@router.post("", response_model=PaymentOut, status_code=201)
def create_payment(payload: PaymentCreate, db: Session = Depends(get_db)):
    return get_service(db).create_payment(payload)


@router.get("", response_model=Page[PaymentOut])
def list_payments(
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).list_payments(params)


@router.get("/stats", response_model=PaymentStatsOut)
def payment_stats(db: Session = Depends(get_db)):
    return get_service(db).get_stats()


@router.get("/order/{order_id}", response_model=PaymentOut)
def payment_for_order(order_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_by_order(order_id)


@router.get("/status/{status}", response_model=Page[PaymentOut])
def payments_by_status(
    status: PaymentState,
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).find_by_status(status, params)


@router.get("/method/{method}", response_model=Page[PaymentOut])
def payments_by_method(
    method: str,
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).find_by_method(method, params)


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(payment_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_payment(payment_id)


@router.patch("/{payment_id}", response_model=PaymentOut)
def update_payment(payment_id: int, payload: PaymentUpdate, db: Session = Depends(get_db)):
    return get_service(db).update_payment(payment_id, payload)


@router.patch("/{payment_id}/refund", response_model=PaymentOut)
def refund_payment(payment_id: int, payload: RefundIn, db: Session = Depends(get_db)):
    """Full refund unless an amount is given."""
    return get_service(db).refund(payment_id, payload.amount, payload.reason)


@router.patch("/{payment_id}/capture", response_model=PaymentOut)
def capture_payment(payment_id: int, db: Session = Depends(get_db)):
    return get_service(db).capture(payment_id)


@router.patch("/{payment_id}/fail", response_model=PaymentOut)
def fail_payment(payment_id: int, payload: PaymentFailureIn, db: Session = Depends(get_db)):
    return get_service(db).fail(payment_id, payload.reason)


@router.delete("/{payment_id}", status_code=204)
def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_payment(payment_id)
    return Response(status_code=204)
