# storefront/repos/admin_repo.py
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.admin import AdminModel


class AdminRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_admin(self, admin_id: int) -> AdminModel | None:
        return self.db.get(AdminModel, admin_id)

    def get_by_email(self, email: str) -> AdminModel | None:
        return self.db.execute(
            select(AdminModel).where(AdminModel.email == email.strip().lower())
        ).scalar_one_or_none()

    def get_by_reset_token(self, token_hash: str) -> AdminModel | None:
        return self.db.execute(
            select(AdminModel).where(AdminModel.password_reset_token == token_hash)
        ).scalar_one_or_none()

    def create_admin(self, admin: AdminModel) -> AdminModel:
        self.db.add(admin)
        self.db.commit()
        self.db.refresh(admin)
        return admin

    def update_admin(self, admin: AdminModel, data: Dict[str, Any]) -> AdminModel:
        for field, value in data.items():
            setattr(admin, field, value)
        self.db.commit()
        self.db.refresh(admin)
        return admin
