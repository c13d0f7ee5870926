# storefront/services/payment_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.payment import PaymentModel
from storefront.domain.enums import PaymentState
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import PaginationParams, PaymentCreate, PaymentUpdate
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.utils.money import ZERO, to_money, utcnow
from storefront.utils.settings import DEFAULT_CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_REFUND_REASON = "Customer request"
LIFECYCLE_KEYS = ("captured", "failure", "refund")


def _lifecycle_entries(meta: Dict[str, Any] | None) -> Dict[str, Any]:
    return {k: v for k, v in (meta or {}).items() if k in LIFECYCLE_KEYS}


class PaymentService:
    """
    One payment per order.
        pending   -> completed (capture) | failed
        completed -> refunded (full or partial, at most the captured amount)
    failed and refunded are terminal. A refund is recorded in the payment
    metadata, so only a single refund is representable.
    """

    def __init__(self, db: Session):
        self.repo = PaymentRepo(db)
        self.orders = OrderRepo(db)

    #query
    def get_payment(self, payment_id: int) -> PaymentModel:
        payment = self.repo.get_payment(payment_id)
        if not payment:
            raise NotFoundError(f"Payment with ID {payment_id} not found")
        return payment

    def get_by_order(self, order_id: int) -> PaymentModel:
        payment = self.repo.get_by_order_id(order_id)
        if not payment:
            raise NotFoundError(f"Payment for order {order_id} not found")
        return payment

    def list_payments(self, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_payments(params)

    def find_by_status(self, status: PaymentState, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_payments(params, status=PaymentState(status).value)

    def find_by_method(self, method: str, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_payments(params, method=method)

    def get_stats(self) -> Dict[str, Any]:
        stats = self.repo.get_stats()
        successful = stats["successful_payments"]
        stats["average_amount"] = (
            to_money(stats["total_amount"] / successful) if successful else ZERO
        )
        return stats

    #commands
    def create_payment(self, payload: PaymentCreate) -> PaymentModel:
        if not self.orders.get_order(payload.order_id):
            raise NotFoundError(f"Order with ID {payload.order_id} not found")

        if self.repo.get_by_order_id(payload.order_id):
            raise ConflictError(f"Payment already exists for order {payload.order_id}")

        if payload.amount <= 0:
            raise ValidationFailed("Payment amount must be greater than 0")

        payment = PaymentModel(
            order_id=payload.order_id,
            method=payload.method,
            status=payload.status.value,
            amount=to_money(payload.amount),
            currency=payload.currency or DEFAULT_CURRENCY,
            transaction_id=payload.transaction_id,
            description=payload.description,
            processor_response=payload.processor_response,
            meta=payload.metadata,
        )
        created = self.repo.create_payment(payment)
        logger.info(f"Payment {created.id} created for order {created.order_id}: {created.amount} via {created.method}")
        return created

    def update_payment(self, payment_id: int, payload: PaymentUpdate) -> PaymentModel:
        payment = self.get_payment(payment_id)
        data = payload.model_dump(exclude_unset=True)

        if payment.status == PaymentState.REFUNDED.value and ("amount" in data or "metadata" in data):
            raise ValidationFailed("Amount and metadata of a refunded payment cannot be changed")

        if "amount" in data:
            if data["amount"] is None or data["amount"] <= 0:
                raise ValidationFailed("Payment amount must be greater than 0")
            payment.amount = to_money(data.pop("amount"))

        if "metadata" in data:
            # recorded capture/refund entries survive a metadata update
            payment.meta = {**(data.pop("metadata") or {}), **_lifecycle_entries(payment.meta)}

        for field, value in data.items():
            if field == "method" and value is None:
                continue
            setattr(payment, field, value)

        return self.repo.save(payment)

    def capture(self, payment_id: int) -> PaymentModel:
        payment = self.get_payment(payment_id)

        if payment.status != PaymentState.PENDING.value:
            raise ValidationFailed("Only pending payments can be captured")

        payment.status = PaymentState.COMPLETED.value
        payment.meta = {**(payment.meta or {}), "captured": {"date": utcnow().isoformat()}}

        captured = self.repo.save(payment)
        logger.info(f"Payment {payment_id} captured ({captured.amount})")
        return captured

    def fail(self, payment_id: int, reason: str | None = None) -> PaymentModel:
        payment = self.get_payment(payment_id)

        if payment.status != PaymentState.PENDING.value:
            raise ValidationFailed("Only pending payments can be marked as failed")

        payment.status = PaymentState.FAILED.value
        payment.meta = {
            **(payment.meta or {}),
            "failure": {"reason": reason or "Declined", "date": utcnow().isoformat()},
        }

        failed = self.repo.save(payment)
        logger.warning(f"Payment {payment_id} failed: {reason}")
        return failed

    def refund(self, payment_id: int, amount: Decimal | None = None, reason: str | None = None) -> PaymentModel:
        payment = self.get_payment(payment_id)

        if payment.status != PaymentState.COMPLETED.value:
            raise ValidationFailed("Only completed payments can be refunded")

        original = to_money(payment.amount)
        refund_amount = to_money(amount) if amount is not None else original
        if refund_amount <= 0:
            raise ValidationFailed("Refund amount must be greater than 0")
        if refund_amount > original:
            raise ValidationFailed("Refund amount cannot exceed payment amount")

        payment.status = PaymentState.REFUNDED.value
        payment.meta = {
            **(payment.meta or {}),
            "refund": {
                "amount": str(refund_amount),
                "reason": reason or DEFAULT_REFUND_REASON,
                "date": utcnow().isoformat(),
            },
        }

        refunded = self.repo.save(payment)
        logger.info(f"Payment {payment_id} refunded {refund_amount} of {original}")
        return refunded

    def delete_payment(self, payment_id: int) -> None:
        payment = self.get_payment(payment_id)

        if payment.status == PaymentState.COMPLETED.value:
            raise ValidationFailed("Completed payments cannot be deleted")

        self.repo.delete_payment(payment)
        logger.info(f"Deleted payment {payment_id}")
