from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class BrandModel(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(120), nullable=False, unique=True)
    description = Column(String, nullable=True)
    logo = Column(String(500), nullable=True)
    website = Column(String(500), nullable=True)
    country = Column(String(100), nullable=True, index=True)
    founded_year = Column(Integer, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    sort_order = Column(Integer, nullable=False, default=0)
    meta = Column("metadata", JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
