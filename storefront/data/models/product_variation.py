from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.enums import StockStatus


def _now():
    return datetime.now(timezone.utc)


class ProductVariationModel(Base):
    __tablename__ = "product_variations"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_variations_price"),
        CheckConstraint("stock_quantity >= 0", name="ck_product_variations_stock_quantity"),
    )

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    sku = Column(String(64), nullable=True, index=True)

    price = Column(Numeric(12, 2), nullable=False)
    sale_price = Column(Numeric(12, 2), nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    stock_status = Column(String(20), nullable=False, default=StockStatus.OUTOFSTOCK.value)

    # {"color": "red", "size": "XL"}
    attributes = Column(JSON, nullable=False, default=dict)
    image = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    product = relationship("ProductModel", back_populates="variations")
