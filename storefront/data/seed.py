# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import ShippingMethodModel
from storefront.domain.enums import TaxStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SHIPPING_METHODS = [
    {
        "name": "Standard Shipping",
        "description": "Delivered in 3-5 business days",
        "cost": Decimal("5.99"),
        "estimated_delivery_days": 5,
        "sort_order": 1,
    },
    {
        "name": "Express Shipping",
        "description": "Delivered in 1-2 business days",
        "cost": Decimal("14.99"),
        "estimated_delivery_days": 2,
        "sort_order": 2,
    },
    {
        "name": "Free Shipping",
        "description": "Orders of 100.00 and more",
        "cost": Decimal("0.00"),
        "minimum_order_amount": Decimal("100.00"),
        "estimated_delivery_days": 7,
        "sort_order": 3,
    },
]


def seed(session_factory=SessionLocal) -> int:
    """Inserts the default shipping methods, returns how many were added."""
    db = session_factory()
    try:
        # not forcing: only seed if empty
        if db.query(ShippingMethodModel).first():
            return 0
        for method in DEFAULT_SHIPPING_METHODS:
            db.add(ShippingMethodModel(tax_status=TaxStatus.TAXABLE.value, enabled=True, **method))
        db.commit()
        logger.info(f"Seeded {len(DEFAULT_SHIPPING_METHODS)} shipping methods")
        return len(DEFAULT_SHIPPING_METHODS)
    finally:
        db.close()
