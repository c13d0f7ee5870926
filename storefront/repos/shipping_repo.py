# storefront/repos/shipping_repo.py
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.shipping_method import ShippingMethodModel


class ShippingRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_method(self, method_id: int) -> ShippingMethodModel | None:
        return self.db.get(ShippingMethodModel, method_id)

    def get_by_name(self, name: str) -> ShippingMethodModel | None:
        return self.db.execute(
            select(ShippingMethodModel).where(ShippingMethodModel.name == name)
        ).scalar_one_or_none()

    def list_methods(self, enabled_only: bool = False) -> List[ShippingMethodModel]:
        stmt = select(ShippingMethodModel)
        if enabled_only:
            stmt = stmt.where(ShippingMethodModel.enabled.is_(True))
        stmt = stmt.order_by(ShippingMethodModel.sort_order, ShippingMethodModel.name)
        return list(self.db.scalars(stmt).all())

    def count(self) -> int:
        return self.db.scalar(select(func.count(ShippingMethodModel.id))) or 0

    def create_method(self, method: ShippingMethodModel) -> ShippingMethodModel:
        self.db.add(method)
        self.db.commit()
        self.db.refresh(method)
        return method

    def update_method(self, method: ShippingMethodModel, data: Dict[str, Any]) -> ShippingMethodModel:
        for field, value in data.items():
            setattr(method, field, value)
        self.db.commit()
        self.db.refresh(method)
        return method

    def delete_method(self, method: ShippingMethodModel) -> None:
        self.db.delete(method)
        self.db.commit()
