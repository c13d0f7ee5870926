from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, JSON, CheckConstraint

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CouponModel(Base):
    __tablename__ = "coupons"
    __table_args__ = (
        CheckConstraint(
            "usage_limit IS NULL OR usage_count <= usage_limit",
            name="ck_coupons_usage_within_limit",
        ),
    )

    id = Column(Integer, primary_key=True)
    code = Column(String(64), nullable=False, unique=True, index=True)
    description = Column(String, nullable=True)

    discount_type = Column(String(20), nullable=False)  # fixed_cart, percent, fixed_product
    amount = Column(Numeric(12, 2), nullable=False)

    usage_limit = Column(Integer, nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)
    expiry_date = Column(DateTime(timezone=True), nullable=True, index=True)

    minimum_spend = Column(Numeric(12, 2), nullable=True)
    maximum_spend = Column(Numeric(12, 2), nullable=True)
    individual_use = Column(Boolean, nullable=False, default=True)

    product_ids = Column(JSON, nullable=True)
    excluded_product_ids = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
