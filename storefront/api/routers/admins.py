# storefront/api/routers/admins.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import (
    AdminActiveIn,
    AdminCreate,
    AdminLogin,
    AdminOut,
    ForgotPasswordIn,
    PasswordChange,
    ResetPasswordIn,
)
from storefront.services.admin_service import AdminService

router = APIRouter(prefix="/admins", tags=["admins"])


def get_service(db: Session):
    return AdminService(db)


@router.post("/register", response_model=AdminOut, status_code=201)
def register(payload: AdminCreate, db: Session = Depends(get_db)):
    return get_service(db).create_admin(payload)


@router.post("/login", response_model=AdminOut)
def login(payload: AdminLogin, db: Session = Depends(get_db)):
    """Checks credentials only, no token is issued."""
    return get_service(db).authenticate(payload.email, payload.password)


@router.post("/forgot-password", status_code=202)
def forgot_password(payload: ForgotPasswordIn, db: Session = Depends(get_db)):
    get_service(db).forgot_password(payload.email)
    # same answer whether or not the account exists
    return {"message": "If the email is registered, reset instructions have been sent"}


@router.post("/reset-password", status_code=204)
def reset_password(payload: ResetPasswordIn, db: Session = Depends(get_db)):
    get_service(db).reset_password(payload.token, payload.new_password)
    return Response(status_code=204)


@router.get("/{admin_id}", response_model=AdminOut)
def get_admin(admin_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_admin(admin_id)


@router.patch("/{admin_id}/password", status_code=204)
def change_password(admin_id: int, payload: PasswordChange, db: Session = Depends(get_db)):
    get_service(db).change_password(admin_id, payload.current_password, payload.new_password)
    return Response(status_code=204)


@router.patch("/{admin_id}/active", response_model=AdminOut)
def set_active(admin_id: int, payload: AdminActiveIn, db: Session = Depends(get_db)):
    return get_service(db).set_active(admin_id, payload.is_active)
