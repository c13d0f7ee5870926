# storefront/repos/coupon_repo.py
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel
from storefront.domain.schemas import PaginationParams
from storefront.repos.pagination import paginate
from storefront.utils.money import utcnow


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_coupon(self, coupon_id: int) -> CouponModel | None:
        return self.db.get(CouponModel, coupon_id)

    def get_by_code(self, code: str) -> CouponModel | None:
        return self.db.execute(
            select(CouponModel).where(CouponModel.code == code.strip().upper())
        ).scalar_one_or_none()

    def list_coupons(self, params: PaginationParams) -> Dict[str, Any]:
        return paginate(self.db, select(CouponModel), CouponModel, params)

    def all_coupons(self) -> List[CouponModel]:
        return list(self.db.scalars(select(CouponModel).order_by(CouponModel.id)).all())

    def find_valid(self, now: datetime) -> List[CouponModel]:
        stmt = (
            select(CouponModel)
            .where(
                or_(CouponModel.expiry_date.is_(None), CouponModel.expiry_date > now),
                or_(
                    CouponModel.usage_limit.is_(None),
                    CouponModel.usage_count < CouponModel.usage_limit,
                ),
            )
            .order_by(CouponModel.id)
        )
        return list(self.db.scalars(stmt).all())

    def create_coupon(self, coupon: CouponModel) -> CouponModel:
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def update_coupon(self, coupon: CouponModel, data: Dict[str, Any]) -> CouponModel:
        for field, value in data.items():
            setattr(coupon, field, value)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def delete_coupon(self, coupon: CouponModel) -> None:
        self.db.delete(coupon)
        self.db.commit()

    def increment_usage(self, code: str) -> int:
        """
        Single conditional UPDATE, the limit check and the increment happen
        in one statement:
            UPDATE coupons SET usage_count = usage_count + 1
            WHERE code = :code AND (usage_limit IS NULL OR usage_count < usage_limit)
        Returns the number of rows touched (0 when the limit is reached).
        """
        result = self.db.execute(
            update(CouponModel)
            .where(
                CouponModel.code == code.strip().upper(),
                or_(
                    CouponModel.usage_limit.is_(None),
                    CouponModel.usage_count < CouponModel.usage_limit,
                ),
            )
            .values(usage_count=CouponModel.usage_count + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount
