from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean

from storefront.data.database import Base
from storefront.domain.enums import TaxStatus


def _now():
    return datetime.now(timezone.utc)


class ShippingMethodModel(Base):
    __tablename__ = "shipping_methods"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String, nullable=True)
    cost = Column(Numeric(12, 2), nullable=False)
    tax_status = Column(String(20), nullable=False, default=TaxStatus.TAXABLE.value)
    enabled = Column(Boolean, nullable=False, default=True, index=True)

    minimum_order_amount = Column(Numeric(12, 2), nullable=True)
    maximum_order_amount = Column(Numeric(12, 2), nullable=True)
    estimated_delivery_days = Column(Integer, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
