# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import pagination_params
from storefront.data.database import get_db
from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.domain.schemas import (
    OrderCreate,
    OrderOut,
    OrderPaymentStatusIn,
    OrderStatsOut,
    OrderStatusIn,
    OrderUpdate,
    Page,
    PaginationParams,
)
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    """
    Places an order. Declared totals must agree with the items.
    Sends a notification asynchronously.
    """
    return get_service(db).create_order(payload)


@router.get("", response_model=Page[OrderOut])
def list_orders(
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(params)


@router.get("/stats", response_model=OrderStatsOut)
def order_stats(db: Session = Depends(get_db)):
    return get_service(db).get_stats()


@router.get("/customer/{customer_id}", response_model=Page[OrderOut])
def orders_by_customer(
    customer_id: int,
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).find_by_customer(customer_id, params)


@router.get("/status/{status}", response_model=Page[OrderOut])
def orders_by_status(
    status: OrderStatus,
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).find_by_status(status, params)


@router.get("/payment/{payment_status}", response_model=Page[OrderOut])
def orders_by_payment_status(
    payment_status: PaymentStatus,
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).find_by_payment_status(payment_status, params)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_order(order_id)


@router.patch("/{order_id}", response_model=OrderOut)
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    return get_service(db).update_order(order_id, payload)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: OrderStatusIn, db: Session = Depends(get_db)):
    return get_service(db).update_status(order_id, payload.status)


@router.patch("/{order_id}/payment-status", response_model=OrderOut)
def update_order_payment_status(
    order_id: int,
    payload: OrderPaymentStatusIn,
    db: Session = Depends(get_db),
):
    return get_service(db).update_payment_status(order_id, payload.payment_status)


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_order(order_id)
    return Response(status_code=204)
