# storefront/domain/enums.py
from enum import Enum


class DiscountType(str, Enum):
    FIXED_CART = "fixed_cart"
    PERCENT = "percent"
    FIXED_PRODUCT = "fixed_product"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"


class PaymentStatus(str, Enum):
    """Payment status as tracked on the order."""

    UNPAID = "unpaid"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


class PaymentState(str, Enum):
    """Lifecycle of a payment record."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class TaxStatus(str, Enum):
    TAXABLE = "taxable"
    NONE = "none"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ProductStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    PUBLISHED = "published"


class StockStatus(str, Enum):
    INSTOCK = "instock"
    OUTOFSTOCK = "outofstock"
    ONBACKORDER = "onbackorder"


class AdminRole(str, Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"
