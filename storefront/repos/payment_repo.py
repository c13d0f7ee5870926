# storefront/repos/payment_repo.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.payment import PaymentModel
from storefront.domain.enums import PaymentState
from storefront.domain.schemas import PaginationParams
from storefront.repos.pagination import paginate


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_payment(self, payment_id: int) -> PaymentModel | None:
        return self.db.get(PaymentModel, payment_id)

    def get_by_order_id(self, order_id: int) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.order_id == order_id)
        ).scalar_one_or_none()

    def list_payments(self, params: PaginationParams, **filters) -> Dict[str, Any]:
        stmt = select(PaymentModel).filter_by(**filters)
        return paginate(self.db, stmt, PaymentModel, params)

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def save(self, payment: PaymentModel) -> PaymentModel:
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def delete_payment(self, payment: PaymentModel) -> None:
        self.db.delete(payment)
        self.db.commit()

    def _count(self, status: PaymentState | None = None) -> int:
        stmt = select(func.count(PaymentModel.id))
        if status is not None:
            stmt = stmt.where(PaymentModel.status == status.value)
        return self.db.scalar(stmt) or 0

    def _breakdown(self, column) -> List[Dict[str, Any]]:
        rows = self.db.execute(
            select(column, func.count(PaymentModel.id).label("count"))
            .group_by(column)
            .order_by(func.count(PaymentModel.id).desc(), column)
        ).all()
        return [{"key": key, "count": count} for key, count in rows]

    def get_stats(self) -> Dict[str, Any]:
        completed_total = self.db.scalar(
            select(func.sum(PaymentModel.amount)).where(
                PaymentModel.status == PaymentState.COMPLETED.value
            )
        )
        return {
            "total_payments": self._count(),
            "total_amount": Decimal(str(completed_total or 0)),
            "successful_payments": self._count(PaymentState.COMPLETED),
            "failed_payments": self._count(PaymentState.FAILED),
            "pending_payments": self._count(PaymentState.PENDING),
            "method_breakdown": self._breakdown(PaymentModel.method),
            "status_breakdown": self._breakdown(PaymentModel.status),
        }
