# storefront/services/shipping_service.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.shipping_method import ShippingMethodModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import ShippingMethodCreate, ShippingMethodUpdate
from storefront.repos.shipping_repo import ShippingRepo
from storefront.utils.money import to_money
from storefront.utils.settings import DEFAULT_CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DELIVERY_DAYS = 3


class ShippingService:
    def __init__(self, db: Session):
        self.repo = ShippingRepo(db)

    def get_method(self, method_id: int) -> ShippingMethodModel:
        method = self.repo.get_method(method_id)
        if not method:
            raise NotFoundError(f"Shipping method with ID {method_id} not found")
        return method

    def list_methods(self) -> List[ShippingMethodModel]:
        return self.repo.list_methods()

    def list_active(self) -> List[ShippingMethodModel]:
        return self.repo.list_methods(enabled_only=True)

    def create_method(self, payload: ShippingMethodCreate) -> ShippingMethodModel:
        if self.repo.get_by_name(payload.name):
            raise ConflictError(f"Shipping method with name '{payload.name}' already exists")

        data = payload.model_dump()
        data["tax_status"] = payload.tax_status.value
        self._check_order_range(data.get("minimum_order_amount"), data.get("maximum_order_amount"))

        created = self.repo.create_method(ShippingMethodModel(**data))
        logger.info(f"Created shipping method {created.name} ({created.cost})")
        return created

    def update_method(self, method_id: int, payload: ShippingMethodUpdate) -> ShippingMethodModel:
        method = self.get_method(method_id)
        data = payload.model_dump(exclude_unset=True)
        for required in ("name", "cost", "tax_status", "enabled", "sort_order"):
            if data.get(required, False) is None:
                data.pop(required)

        if "name" in data:
            existing = self.repo.get_by_name(data["name"])
            if existing and existing.id != method.id:
                raise ConflictError(f"Shipping method with name '{data['name']}' already exists")

        if "tax_status" in data:
            data["tax_status"] = data["tax_status"].value

        self._check_order_range(
            data.get("minimum_order_amount", method.minimum_order_amount),
            data.get("maximum_order_amount", method.maximum_order_amount),
        )
        return self.repo.update_method(method, data)

    def toggle(self, method_id: int, enabled: bool) -> ShippingMethodModel:
        method = self.get_method(method_id)
        logger.info(f"Shipping method {method.name} enabled={enabled}")
        return self.repo.update_method(method, {"enabled": enabled})

    def delete_method(self, method_id: int) -> None:
        method = self.get_method(method_id)
        self.repo.delete_method(method)
        logger.info(f"Deleted shipping method {method_id}")

    def calculate(self, order_amount: Decimal | None = None) -> Dict[str, Any]:
        """Quotes every enabled method that accepts the order amount, cheapest first."""
        methods = [m for m in self.list_active() if self._accepts(m, order_amount)]
        if not methods:
            raise ValidationFailed("No shipping methods available for this destination")

        quotes = sorted(
            (
                {
                    "method_id": m.id,
                    "name": m.name,
                    "cost": max(to_money(m.cost), to_money(0)),
                    "estimated_days": m.estimated_delivery_days or DEFAULT_DELIVERY_DAYS,
                    "description": m.description or "",
                }
                for m in methods
            ),
            key=lambda q: (q["cost"], q["name"]),
        )

        return {
            "available_methods": quotes,
            "total_cost": quotes[0]["cost"],
            "currency": DEFAULT_CURRENCY,
        }

    @staticmethod
    def _accepts(method: ShippingMethodModel, order_amount: Decimal | None) -> bool:
        if order_amount is None:
            return True
        amount = to_money(order_amount)
        if method.minimum_order_amount is not None and amount < to_money(method.minimum_order_amount):
            return False
        if method.maximum_order_amount is not None and amount > to_money(method.maximum_order_amount):
            return False
        return True

    @staticmethod
    def _check_order_range(minimum, maximum) -> None:
        if minimum is not None and maximum is not None and to_money(minimum) > to_money(maximum):
            raise ValidationFailed("Minimum order amount cannot exceed maximum order amount")
