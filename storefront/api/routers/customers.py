# storefront/api/routers/customers.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import pagination_params
from storefront.data.database import get_db
from storefront.domain.schemas import (
    CustomerCreate,
    CustomerLogin,
    CustomerOut,
    CustomerUpdate,
    Page,
    PaginationParams,
    PasswordChange,
)
from storefront.services.customer_service import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])


def get_service(db: Session):
    return CustomerService(db)


@router.post("", response_model=CustomerOut, status_code=201)
def create_customer(payload: CustomerCreate, db: Session = Depends(get_db)):
    return get_service(db).create_customer(payload)


@router.get("", response_model=Page[CustomerOut])
def list_customers(
    params: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    return get_service(db).list_customers(params)


@router.get("/search", response_model=List[CustomerOut])
def search_customers(
    first_name: str = Query(..., min_length=1),
    last_name: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    return get_service(db).find_by_name(first_name, last_name)


@router.post("/login", response_model=CustomerOut)
def login(payload: CustomerLogin, db: Session = Depends(get_db)):
    """Checks credentials only, no token is issued."""
    return get_service(db).authenticate(payload.email, payload.password)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_customer(customer_id)


@router.patch("/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, payload: CustomerUpdate, db: Session = Depends(get_db)):
    return get_service(db).update_customer(customer_id, payload)


@router.patch("/{customer_id}/password", status_code=204)
def change_password(customer_id: int, payload: PasswordChange, db: Session = Depends(get_db)):
    get_service(db).change_password(customer_id, payload.current_password, payload.new_password)
    return Response(status_code=204)


@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_customer(customer_id)
    return Response(status_code=204)
