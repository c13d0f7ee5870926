from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Boolean, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.enums import ProductStatus, StockStatus


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price"),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_quantity"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False, index=True)
    slug = Column(String(220), nullable=False, unique=True)
    sku = Column(String(64), nullable=False, unique=True)
    description = Column(String, nullable=True)
    short_description = Column(String, nullable=True)

    price = Column(Numeric(12, 2), nullable=False)
    sale_price = Column(Numeric(12, 2), nullable=True)
    status = Column(String(20), nullable=False, default=ProductStatus.DRAFT.value, index=True)

    manage_stock = Column(Boolean, nullable=False, default=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    stock_status = Column(String(20), nullable=False, default=StockStatus.INSTOCK.value, index=True)
    allow_backorders = Column(Boolean, nullable=False, default=False)

    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=True, index=True)
    images = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    categories = relationship(
        "ProductCategoryModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductCategoryModel.id",
    )
    variations = relationship(
        "ProductVariationModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariationModel.id",
    )

    @property
    def category_ids(self):
        return [c.category_id for c in self.categories]
