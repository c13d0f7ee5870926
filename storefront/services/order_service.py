# storefront/services/order_service.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import OrderCreate, OrderItemIn, OrderUpdate, PaginationParams
from storefront.repos.customer_repo import CustomerRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.money import money_sum, reconciles, to_money
from storefront.utils.settings import DEFAULT_CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# allowed order status transitions, anything missing here is rejected
ORDER_TRANSITIONS: Dict[OrderStatus, frozenset] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.FAILED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.FAILED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
    OrderStatus.FAILED: frozenset({OrderStatus.PENDING}),
}


def is_valid_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return OrderStatus(new) in ORDER_TRANSITIONS.get(OrderStatus(current), frozenset())


def _to_item_models(items: List[OrderItemIn]) -> List[OrderItemModel]:
    return [
        OrderItemModel(
            product_id=i.product_id,
            variation_id=i.variation_id,
            name=i.name,
            sku=i.sku,
            quantity=i.quantity,
            price=to_money(i.price),
            subtotal=to_money(i.subtotal),
            total=to_money(i.total),
        )
        for i in items
    ]


class OrderService:
    """
    Order use cases. Items are a snapshot taken when the order is placed and
    never follow later product changes.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.customers = CustomerRepo(db)
        self.payments = PaymentRepo(db)
        self.notification_service = notification_service or NotificationService()

    #query
    def get_order(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order with ID {order_id} not found")
        return order

    def list_orders(self, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_orders(params)

    def find_by_customer(self, customer_id: int, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_orders(params, customer_id=customer_id)

    def find_by_status(self, status: OrderStatus, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_orders(params, status=OrderStatus(status).value)

    def find_by_payment_status(self, payment_status: PaymentStatus, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_orders(params, payment_status=PaymentStatus(payment_status).value)

    def get_stats(self) -> Dict[str, Any]:
        return self.repo.get_stats()

    #commands
    def create_order(self, payload: OrderCreate) -> OrderModel:
        if not self.customers.get_customer(payload.customer_id):
            raise NotFoundError(f"Customer with ID {payload.customer_id} not found")

        self._reconcile(payload)

        order = OrderModel(
            customer_id=payload.customer_id,
            status=payload.status.value,
            payment_method=payload.payment_method,
            payment_status=payload.payment_status.value,
            subtotal=to_money(payload.subtotal),
            discount_total=to_money(payload.discount_total),
            shipping_total=to_money(payload.shipping_total),
            tax_total=to_money(payload.tax_total),
            total=to_money(payload.total),
            currency=payload.currency or DEFAULT_CURRENCY,
            billing_address=payload.billing_address.model_dump(),
            shipping_address=payload.shipping_address.model_dump(),
            items=_to_item_models(payload.items),
        )
        created = self.repo.create_order(order)

        logger.info(f"Order {created.id} created for customer {created.customer_id}, total {created.total}")
        self.notification_service.send_order_notification(created.customer_id, created.id, created.status)
        return created

    def update_order(self, order_id: int, payload: OrderUpdate) -> OrderModel:
        order = self.get_order(order_id)
        data = payload.model_dump(exclude_unset=True, exclude={"items"})
        data = {k: v for k, v in data.items() if v is not None}

        for field in ("discount_total", "shipping_total", "tax_total"):
            if field in data:
                data[field] = to_money(data[field])

        items = None
        if payload.items is not None:
            # replaced lines drive the totals, figures not in the update keep their stored value
            shipping = data.get("shipping_total", order.shipping_total)
            tax = data.get("tax_total", order.tax_total)
            discount = data.get("discount_total", order.discount_total)

            items = _to_item_models(payload.items)
            data["subtotal"] = money_sum(i.subtotal for i in payload.items)
            data["total"] = (
                money_sum(i.total for i in payload.items)
                + to_money(shipping)
                + to_money(tax)
                - to_money(discount)
            )
            if data["total"] < 0:
                raise ValidationFailed("Order total cannot be negative")

        logger.info(f"Updating order {order_id}: {sorted(data)}")
        return self.repo.update_order(order, data, items)

    def update_status(self, order_id: int, status: OrderStatus) -> OrderModel:
        order = self.get_order(order_id)
        new_status = OrderStatus(status)

        if not is_valid_transition(order.status, new_status):
            logger.warning(f"Order {order_id}: rejected transition {order.status} -> {new_status.value}")
            raise ValidationFailed(
                f"Invalid status transition from {order.status} to {new_status.value}"
            )

        updated = self.repo.update_status(order, new_status.value)
        logger.info(f"Order {order_id} status -> {updated.status}")
        self.notification_service.send_order_notification(updated.customer_id, updated.id, updated.status)
        return updated

    def update_payment_status(self, order_id: int, payment_status: PaymentStatus) -> OrderModel:
        # not coupled to the order status
        order = self.get_order(order_id)
        updated = self.repo.update_payment_status(order, PaymentStatus(payment_status).value)
        logger.info(f"Order {order_id} payment status -> {updated.payment_status}")
        return updated

    def delete_order(self, order_id: int) -> None:
        order = self.get_order(order_id)
        if self.payments.get_by_order_id(order_id):
            raise ConflictError(f"Order {order_id} has a payment and cannot be deleted")
        self.repo.delete_order(order)
        logger.info(f"Deleted order {order_id}")

    #helpers
    @staticmethod
    def _reconcile(payload: OrderCreate) -> None:
        """
        Declared figures must agree with the items, within 0.01:
          sum(item.subtotal) == subtotal
          sum(item.total)    == total - shipping - tax + discount
          subtotal + shipping + tax - discount == total
        """
        shipping = to_money(payload.shipping_total)
        tax = to_money(payload.tax_total)
        discount = to_money(payload.discount_total)
        total = to_money(payload.total)

        items_subtotal = money_sum(i.subtotal for i in payload.items)
        if not reconciles(items_subtotal, payload.subtotal):
            raise ValidationFailed("Subtotal does not match item subtotals")

        items_total = money_sum(i.total for i in payload.items)
        before_adjustments = total - shipping - tax + discount
        if not reconciles(items_total, before_adjustments):
            raise ValidationFailed("Total does not match item totals")

        expected: Decimal = to_money(payload.subtotal) + shipping + tax - discount
        if not reconciles(expected, total):
            raise ValidationFailed("Total does not match subtotal + shipping + tax - discount")
