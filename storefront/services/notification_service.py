# storefront/services/notification_service.py
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer and admin notifications, handed to Celery so the request never
    waits on them. The triggering write is already committed when these run,
    so a broker outage is logged and the notification dropped.
    """

    @staticmethod
    def send_order_notification(customer_id: int, order_id: int, status: str) -> bool:
        return _enqueue(send_order_notification_task, customer_id, order_id, status)

    @staticmethod
    def send_password_reset(email: str, token: str) -> bool:
        return _enqueue(send_password_reset_task, email, token)


def _enqueue(task, *args) -> bool:
    try:
        task.delay(*args)
    except OperationalError as e:
        logger.warning(f"{task.name} not queued, broker unavailable: {e}")
        return False
    return True


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(customer_id: int, order_id: int, status: str):
    # delivery channels (email, SMS, push) plug in here; for now the event is logged
    logger.info(f"[NOTIFICATION] Customer {customer_id}: order {order_id} is now {status}")

    return {"customer_id": customer_id, "order_id": order_id, "status": status, "sent": True}


@celery_app.task(name="storefront.services.notification_service.send_password_reset_task")
def send_password_reset_task(email: str, token: str):
    # the token goes to the mail channel only, never to the log
    logger.info(f"[NOTIFICATION] Password reset instructions for {email}")

    return {"email": email, "sent": True}
