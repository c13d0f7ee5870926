# storefront/services/coupon_service.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel
from storefront.domain.enums import DiscountType
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import CouponCreate, CouponUpdate, PaginationParams
from storefront.repos.coupon_repo import CouponRepo
from storefront.utils.money import ZERO, as_utc, to_money, utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def compute_discount(discount_type: str, amount, cart_total) -> Decimal:
    """
    fixed_cart    -> amount, capped at the cart total
    percent       -> cart_total * amount / 100
    fixed_product -> amount, flat
    """
    amount = to_money(amount)
    cart_total = to_money(cart_total)

    if discount_type == DiscountType.FIXED_CART.value:
        return min(amount, cart_total)
    if discount_type == DiscountType.PERCENT.value:
        return to_money(cart_total * amount / Decimal(100))
    if discount_type == DiscountType.FIXED_PRODUCT.value:
        return amount
    return ZERO


class CouponService:
    def __init__(self, db: Session):
        self.repo = CouponRepo(db)

    #query
    def get_coupon(self, coupon_id: int) -> CouponModel:
        coupon = self.repo.get_coupon(coupon_id)
        if not coupon:
            raise NotFoundError(f"Coupon with ID {coupon_id} not found")
        return coupon

    def get_by_code(self, code: str) -> CouponModel:
        coupon = self.repo.get_by_code(code)
        if not coupon:
            raise NotFoundError(f"Coupon with code '{code}' not found")
        return coupon

    def list_coupons(self, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_coupons(params)

    def find_valid_coupons(self) -> List[CouponModel]:
        return self.repo.find_valid(utcnow())

    def find_coupons_by_product(self, product_id: str) -> List[CouponModel]:
        # lists live in JSON columns, membership is checked here
        return [
            c for c in self.repo.all_coupons()
            if (not c.product_ids or product_id in c.product_ids)
            and product_id not in (c.excluded_product_ids or [])
        ]

    #commands
    def create_coupon(self, payload: CouponCreate) -> CouponModel:
        code = payload.code.upper()
        if self.repo.get_by_code(code):
            raise ConflictError(f"Coupon with code '{code}' already exists")

        self._check_amount(payload.discount_type.value, payload.amount)
        self._check_spend_range(payload.minimum_spend, payload.maximum_spend)

        data = payload.model_dump()
        data["code"] = code
        data["discount_type"] = payload.discount_type.value
        data["expiry_date"] = as_utc(payload.expiry_date)

        created = self.repo.create_coupon(CouponModel(usage_count=0, **data))
        logger.info(f"Created coupon {created.code} ({created.discount_type} {created.amount})")
        return created

    def update_coupon(self, coupon_id: int, payload: CouponUpdate) -> CouponModel:
        coupon = self.get_coupon(coupon_id)
        data = payload.model_dump(exclude_unset=True)
        for required in ("code", "discount_type", "amount", "individual_use"):
            if data.get(required, False) is None:
                data.pop(required)

        if data.get("code"):
            data["code"] = data["code"].strip().upper()
            existing = self.repo.get_by_code(data["code"])
            if existing and existing.id != coupon.id:
                raise ConflictError(f"Coupon with code '{data['code']}' already exists")

        if data.get("discount_type") is not None:
            data["discount_type"] = DiscountType(data["discount_type"]).value

        if "amount" in data or "discount_type" in data:
            self._check_amount(
                data.get("discount_type") or coupon.discount_type,
                data["amount"] if data.get("amount") is not None else coupon.amount,
            )

        if data.get("usage_limit") is not None and data["usage_limit"] < coupon.usage_count:
            raise ValidationFailed(
                f"Usage limit cannot be below the current usage count of {coupon.usage_count}"
            )

        if "minimum_spend" in data or "maximum_spend" in data:
            self._check_spend_range(
                data["minimum_spend"] if "minimum_spend" in data else coupon.minimum_spend,
                data["maximum_spend"] if "maximum_spend" in data else coupon.maximum_spend,
            )

        if "expiry_date" in data:
            data["expiry_date"] = as_utc(data["expiry_date"])

        logger.info(f"Updating coupon {coupon.code}: {sorted(data)}")
        return self.repo.update_coupon(coupon, data)

    def delete_coupon(self, coupon_id: int) -> None:
        coupon = self.get_coupon(coupon_id)
        self.repo.delete_coupon(coupon)
        logger.info(f"Deleted coupon {coupon_id}")

    def validate(self, code: str, cart_total, product_ids: Iterable[str] = ()) -> Dict[str, Any]:
        """
        Checks run in a fixed order and the first failure wins:
        existence, expiry, usage limit, minimum spend, maximum spend,
        inclusion list, exclusion list.
        """
        cart_total = to_money(cart_total)
        product_ids = set(product_ids or ())

        coupon = self.repo.get_by_code(code)
        if not coupon:
            return self._rejected("Coupon not found")

        if self._expired(coupon):
            return self._rejected("Coupon has expired")

        if coupon.usage_limit is not None and coupon.usage_count >= coupon.usage_limit:
            return self._rejected("Coupon usage limit exceeded")

        if coupon.minimum_spend is not None and cart_total < to_money(coupon.minimum_spend):
            return self._rejected(f"Minimum spend of {to_money(coupon.minimum_spend)} required")

        if coupon.maximum_spend is not None and cart_total > to_money(coupon.maximum_spend):
            return self._rejected(f"Maximum spend of {to_money(coupon.maximum_spend)} exceeded")

        if coupon.product_ids and not product_ids.intersection(coupon.product_ids):
            return self._rejected("Coupon does not apply to any products in cart")

        if coupon.excluded_product_ids and product_ids.intersection(coupon.excluded_product_ids):
            return self._rejected("Coupon cannot be used with excluded products")

        return {
            "is_valid": True,
            "discount_amount": compute_discount(coupon.discount_type, coupon.amount, cart_total),
            "message": None,
            "coupon": coupon,
        }

    def apply(self, code: str) -> CouponModel:
        coupon = self.get_by_code(code)

        if self._expired(coupon):
            raise ValidationFailed("Coupon has expired")

        if self.repo.increment_usage(coupon.code) == 0:
            logger.warning(f"Coupon {coupon.code} rejected, usage limit {coupon.usage_limit} reached")
            raise ValidationFailed("Coupon usage limit exceeded")

        applied = self.get_by_code(coupon.code)
        logger.info(f"Applied coupon {applied.code}, usage {applied.usage_count}/{applied.usage_limit}")
        return applied

    #helpers
    @staticmethod
    def _rejected(message: str) -> Dict[str, Any]:
        return {"is_valid": False, "discount_amount": ZERO, "message": message, "coupon": None}

    @staticmethod
    def _expired(coupon: CouponModel) -> bool:
        expiry = as_utc(coupon.expiry_date)
        return expiry is not None and expiry < utcnow()

    @staticmethod
    def _check_amount(discount_type: str, amount) -> None:
        if discount_type == DiscountType.PERCENT.value and to_money(amount) > 100:
            raise ValidationFailed("Percentage discount cannot exceed 100%")

    @staticmethod
    def _check_spend_range(minimum, maximum) -> None:
        if minimum is not None and maximum is not None and to_money(minimum) >= to_money(maximum):
            raise ValidationFailed("Minimum spend must be less than maximum spend")
