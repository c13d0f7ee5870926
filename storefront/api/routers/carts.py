# storefront/api/routers/carts.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_product_client
from storefront.data.database import get_db
from storefront.domain.schemas import (
    CartOut,
    CartTotalOut,
    CreateCartIn,
    CustomerRefIn,
    ItemIn,
    QuantityIn,
)
from storefront.services.cart_service import CartService
from storefront.services.product_client import ProductClient

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
):
    return CartService(db=db, product_client=product_client)


@router.post("", response_model=CartOut, status_code=201)
def create_cart(payload: CreateCartIn, svc: CartService = Depends(get_service)):
    return svc.create_cart(payload.customer_id)


@router.get("/session/{session_id}", response_model=CartOut)
def get_cart_by_session(session_id: str, svc: CartService = Depends(get_service)):
    return svc.get_cart_by_session_id(session_id)


@router.get("/customer/{customer_id}", response_model=CartOut)
def get_cart_by_customer(customer_id: int, svc: CartService = Depends(get_service)):
    return svc.get_cart_by_customer_id(customer_id)


@router.patch("/session/{session_id}/assign-customer", response_model=CartOut)
def assign_customer(session_id: str, payload: CustomerRefIn, svc: CartService = Depends(get_service)):
    return svc.assign_to_customer(session_id, payload.customer_id)


@router.post("/session/{session_id}/merge", response_model=CartOut)
def merge_guest_cart(session_id: str, payload: CustomerRefIn, svc: CartService = Depends(get_service)):
    """
    Moves every line of the guest cart into the customer's cart and
    deletes the guest cart.
    """
    return svc.merge_guest_cart(session_id, payload.customer_id)


@router.get("/{cart_id}", response_model=CartOut)
def get_cart(cart_id: int, svc: CartService = Depends(get_service)):
    return svc.get_cart(cart_id)


@router.post("/{cart_id}/items", response_model=CartOut)
def add_item(cart_id: int, payload: ItemIn, svc: CartService = Depends(get_service)):
    return svc.add_item(
        cart_id=cart_id,
        product_id=payload.product_id,
        variation_id=payload.variation_id,
        quantity=payload.quantity,
    )


@router.patch("/{cart_id}/items/{product_id}", response_model=CartOut)
def update_item_quantity(
    cart_id: int,
    product_id: str,
    payload: QuantityIn,
    variation_id: Optional[str] = Query(None),
    svc: CartService = Depends(get_service),
):
    return svc.update_item_quantity(cart_id, product_id, variation_id, payload.quantity)


@router.delete("/{cart_id}/items/{product_id}", response_model=CartOut)
def remove_item(
    cart_id: int,
    product_id: str,
    variation_id: Optional[str] = Query(None),
    svc: CartService = Depends(get_service),
):
    return svc.remove_item(cart_id, product_id, variation_id)


@router.delete("/{cart_id}/clear", response_model=CartOut)
def clear_cart(cart_id: int, svc: CartService = Depends(get_service)):
    return svc.clear_cart(cart_id)


@router.get("/{cart_id}/total", response_model=CartTotalOut)
def cart_total(cart_id: int, svc: CartService = Depends(get_service)):
    total = svc.calculate_total(cart_id)
    cart = svc.get_cart(cart_id)
    return {"cart_id": cart.id, "total": total, "currency": cart.currency}


@router.delete("/{cart_id}", status_code=204)
def delete_cart(cart_id: int, svc: CartService = Depends(get_service)):
    svc.delete_cart(cart_id)
    return Response(status_code=204)
