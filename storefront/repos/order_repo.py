# storefront/repos/order_repo.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.domain.schemas import PaginationParams
from storefront.repos.pagination import paginate


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, params: PaginationParams, **filters) -> Dict[str, Any]:
        stmt = select(OrderModel).filter_by(**filters)
        return paginate(self.db, stmt, OrderModel, params)

    def count_by_customer(self, customer_id: int) -> int:
        return self.db.scalar(
            select(func.count(OrderModel.id)).where(OrderModel.customer_id == customer_id)
        ) or 0

    def update_order(
        self,
        order: OrderModel,
        data: Dict[str, Any],
        items: List[OrderItemModel] | None = None,
    ) -> OrderModel:
        for field, value in data.items():
            setattr(order, field, value)
        if items is not None:
            # delete-orphan drops the previous lines
            order.items = items
        self.db.commit()
        self.db.refresh(order)
        return order

    def update_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        self.db.commit()
        self.db.refresh(order)
        return order

    def update_payment_status(self, order: OrderModel, payment_status: str) -> OrderModel:
        order.payment_status = payment_status
        self.db.commit()
        self.db.refresh(order)
        return order

    def delete_order(self, order: OrderModel) -> None:
        self.db.delete(order)
        self.db.commit()

    def get_stats(self) -> Dict[str, Any]:
        total_orders = self.db.scalar(select(func.count(OrderModel.id))) or 0
        revenue = self.db.scalar(
            select(func.sum(OrderModel.total)).where(
                OrderModel.payment_status == PaymentStatus.PAID.value
            )
        )
        pending = self.db.scalar(
            select(func.count(OrderModel.id)).where(OrderModel.status == OrderStatus.PENDING.value)
        ) or 0
        completed = self.db.scalar(
            select(func.count(OrderModel.id)).where(OrderModel.status == OrderStatus.COMPLETED.value)
        ) or 0

        return {
            "total_orders": total_orders,
            "total_revenue": Decimal(str(revenue or 0)),
            "pending_orders": pending,
            "completed_orders": completed,
        }
