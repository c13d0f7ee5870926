# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from storefront.domain.enums import (
    AdminRole,
    DiscountType,
    OrderStatus,
    PaymentState,
    PaymentStatus,
    ProductStatus,
    SortOrder,
    StockStatus,
    TaxStatus,
)
from storefront.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class PaginationParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort: Optional[str] = None
    order: SortOrder = SortOrder.DESC


class Page(BaseModel, Generic[T]):
    """One page of a listing."""

    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


class Address(BaseModel):
    """Billing or shipping address snapshot."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    company: Optional[str] = None
    address_line1: str = Field(..., min_length=1)
    address_line2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: Optional[str] = None
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("first_name", "last_name", "address_line1", "city", "postal_code", "country")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
class CustomerCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    password: str = Field(..., min_length=8, description="Plain password, stored hashed")
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None


class CustomerUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None


class CustomerLogin(BaseModel):
    email: EmailStr
    password: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)


class CustomerOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------
class CreateCartIn(BaseModel):
    """Guest cart when customer_id is omitted."""

    customer_id: Optional[int] = Field(None, gt=0)


class ItemIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    variation_id: Optional[str] = Field(None, min_length=1)
    quantity: int = Field(..., gt=0, description="Quantity to add (must be > 0)")


class QuantityIn(BaseModel):
    quantity: int = Field(..., description="New quantity (must be > 0)")


class CustomerRefIn(BaseModel):
    customer_id: int = Field(..., gt=0)


class CartItemOut(BaseModel):
    id: int
    product_id: str
    variation_id: Optional[str] = None
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    id: int
    session_id: str
    customer_id: Optional[int] = None
    items: List[CartItemOut]
    total: Decimal
    currency: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartTotalOut(BaseModel):
    cart_id: int
    total: Decimal
    currency: str


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
class CouponCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    description: Optional[str] = None
    discount_type: DiscountType
    amount: Decimal = Field(..., ge=0)
    usage_limit: Optional[int] = Field(None, ge=1)
    expiry_date: Optional[datetime] = None
    minimum_spend: Optional[Decimal] = Field(None, ge=0)
    maximum_spend: Optional[Decimal] = Field(None, ge=0)
    individual_use: bool = True
    product_ids: Optional[List[str]] = None
    excluded_product_ids: Optional[List[str]] = None

    @field_validator("code")
    @classmethod
    def _strip_code(cls, v: str) -> str:
        return v.strip()


class CouponUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1, max_length=64)
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    usage_limit: Optional[int] = Field(None, ge=1)
    expiry_date: Optional[datetime] = None
    minimum_spend: Optional[Decimal] = Field(None, ge=0)
    maximum_spend: Optional[Decimal] = Field(None, ge=0)
    individual_use: Optional[bool] = None
    product_ids: Optional[List[str]] = None
    excluded_product_ids: Optional[List[str]] = None


class CouponOut(BaseModel):
    id: int
    code: str
    description: Optional[str] = None
    discount_type: DiscountType
    amount: Decimal
    usage_limit: Optional[int] = None
    usage_count: int
    expiry_date: Optional[datetime] = None
    minimum_spend: Optional[Decimal] = None
    maximum_spend: Optional[Decimal] = None
    individual_use: bool
    product_ids: Optional[List[str]] = None
    excluded_product_ids: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CouponValidateIn(BaseModel):
    code: str = Field(..., min_length=1)
    cart_total: Decimal = Field(..., ge=0)
    product_ids: List[str] = Field(default_factory=list)


class CouponValidationOut(BaseModel):
    is_valid: bool
    discount_amount: Decimal
    message: Optional[str] = None
    coupon: Optional[CouponOut] = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    variation_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    sku: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0)
    subtotal: Decimal = Field(..., ge=0, description="Before tax/discount")
    total: Decimal = Field(..., ge=0, description="After tax/discount")


class OrderItemOut(OrderItemIn):
    id: int

    model_config = ConfigDict(from_attributes=True)


class OrderCreate(BaseModel):
    customer_id: int = Field(..., gt=0)
    status: OrderStatus = OrderStatus.PENDING
    payment_method: str = Field(..., min_length=1)
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    subtotal: Decimal = Field(..., ge=0)
    discount_total: Decimal = Field(Decimal("0"), ge=0)
    shipping_total: Decimal = Field(Decimal("0"), ge=0)
    tax_total: Decimal = Field(Decimal("0"), ge=0)
    total: Decimal = Field(..., ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    billing_address: Address
    shipping_address: Address
    items: List[OrderItemIn] = Field(..., min_length=1)


class OrderUpdate(BaseModel):
    payment_method: Optional[str] = Field(None, min_length=1)
    discount_total: Optional[Decimal] = Field(None, ge=0)
    shipping_total: Optional[Decimal] = Field(None, ge=0)
    tax_total: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    items: Optional[List[OrderItemIn]] = Field(None, min_length=1)


class OrderStatusIn(BaseModel):
    status: OrderStatus


class OrderPaymentStatusIn(BaseModel):
    payment_status: PaymentStatus


class OrderOut(BaseModel):
    id: int
    customer_id: int
    status: OrderStatus
    payment_method: str
    payment_status: PaymentStatus
    subtotal: Decimal
    discount_total: Decimal
    shipping_total: Decimal
    tax_total: Decimal
    total: Decimal
    currency: str
    billing_address: Address
    shipping_address: Address
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderStatsOut(BaseModel):
    total_orders: int
    total_revenue: Decimal
    pending_orders: int
    completed_orders: int


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class PaymentCreate(BaseModel):
    order_id: int = Field(..., gt=0)
    amount: Decimal = Field(..., ge=0)
    method: str = Field(..., min_length=1, description="credit_card, paypal, bank_transfer, ...")
    status: PaymentState = PaymentState.PENDING
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    processor_response: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None


class PaymentUpdate(BaseModel):
    amount: Optional[Decimal] = None
    method: Optional[str] = Field(None, min_length=1)
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    processor_response: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None


class RefundIn(BaseModel):
    amount: Optional[Decimal] = Field(None, gt=0, description="Defaults to the full payment amount")
    reason: Optional[str] = None


class PaymentFailureIn(BaseModel):
    reason: Optional[str] = None


class PaymentOut(BaseModel):
    id: int
    order_id: int
    method: str
    status: PaymentState
    amount: Decimal
    currency: str
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    processor_response: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BreakdownEntry(BaseModel):
    key: str
    count: int


class PaymentStatsOut(BaseModel):
    total_payments: int
    total_amount: Decimal
    successful_payments: int
    failed_payments: int
    pending_payments: int
    average_amount: Decimal
    method_breakdown: List[BreakdownEntry]
    status_breakdown: List[BreakdownEntry]


# ---------------------------------------------------------------------------
# Shipping
# ---------------------------------------------------------------------------
class ShippingMethodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    cost: Decimal = Field(..., ge=0)
    tax_status: TaxStatus = TaxStatus.TAXABLE
    enabled: bool = True
    minimum_order_amount: Optional[Decimal] = Field(None, ge=0)
    maximum_order_amount: Optional[Decimal] = Field(None, ge=0)
    estimated_delivery_days: Optional[int] = Field(None, ge=1)
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()


class ShippingMethodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    cost: Optional[Decimal] = Field(None, ge=0)
    tax_status: Optional[TaxStatus] = None
    enabled: Optional[bool] = None
    minimum_order_amount: Optional[Decimal] = Field(None, ge=0)
    maximum_order_amount: Optional[Decimal] = Field(None, ge=0)
    estimated_delivery_days: Optional[int] = Field(None, ge=1)
    sort_order: Optional[int] = None


class ShippingToggleIn(BaseModel):
    enabled: bool


class ShippingMethodOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    cost: Decimal
    tax_status: TaxStatus
    enabled: bool
    minimum_order_amount: Optional[Decimal] = None
    maximum_order_amount: Optional[Decimal] = None
    estimated_delivery_days: Optional[int] = None
    sort_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ShippingCalculateIn(BaseModel):
    order_amount: Optional[Decimal] = Field(None, ge=0)
    shipping_address: Optional[Address] = None


class ShippingQuote(BaseModel):
    method_id: int
    name: str
    cost: Decimal
    estimated_days: int
    description: str


class ShippingCalculationOut(BaseModel):
    available_methods: List[ShippingQuote]
    total_cost: Decimal
    currency: str


# ---------------------------------------------------------------------------
# Admins
# ---------------------------------------------------------------------------
class AdminCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: AdminRole = AdminRole.ADMIN


class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordIn(BaseModel):
    email: EmailStr


class ResetPasswordIn(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class AdminActiveIn(BaseModel):
    is_active: bool


class AdminOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: AdminRole
    is_active: bool
    last_login_at: Optional[datetime] = None
    password_changed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Brands
# ---------------------------------------------------------------------------
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class BrandCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., max_length=120, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    country: Optional[str] = Field(None, max_length=100)
    founded_year: Optional[int] = Field(None, ge=1800)
    is_active: bool = True
    sort_order: int = Field(0, ge=0)
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()


class BrandUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    country: Optional[str] = Field(None, max_length=100)
    founded_year: Optional[int] = Field(None, ge=1800)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)
    metadata: Optional[Dict[str, Any]] = None


class BrandOrderIn(BaseModel):
    sort_order: int


class BrandOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    country: Optional[str] = None
    founded_year: Optional[int] = None
    is_active: bool
    sort_order: int
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BrandStatsOut(BaseModel):
    total_brands: int
    active_brands: int
    countries: List[str]


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class ProductImage(BaseModel):
    src: str = Field(..., min_length=1)
    alt: Optional[str] = None
    position: int = 0


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., max_length=220, pattern=SLUG_PATTERN)
    sku: str = Field(..., min_length=1, max_length=64)
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    status: ProductStatus = ProductStatus.DRAFT
    manage_stock: bool = False
    stock_quantity: int = Field(0, ge=0)
    stock_status: StockStatus = StockStatus.INSTOCK
    allow_backorders: bool = False
    brand_id: Optional[int] = None
    category_ids: List[str] = []
    images: List[ProductImage] = []

    @field_validator("name", "sku")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=220, pattern=SLUG_PATTERN)
    sku: Optional[str] = Field(None, min_length=1, max_length=64)
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    status: Optional[ProductStatus] = None
    manage_stock: Optional[bool] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    stock_status: Optional[StockStatus] = None
    allow_backorders: Optional[bool] = None
    brand_id: Optional[int] = None
    category_ids: Optional[List[str]] = None
    images: Optional[List[ProductImage]] = None


class StockAdjustIn(BaseModel):
    quantity: int = Field(..., description="Signed delta added to the current stock")


class VariationCreate(BaseModel):
    sku: Optional[str] = Field(None, max_length=64)
    price: Decimal = Field(..., ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    stock_quantity: int = Field(0, ge=0)
    attributes: Dict[str, str] = {}
    image: Optional[str] = None


class VariationUpdate(BaseModel):
    sku: Optional[str] = Field(None, max_length=64)
    price: Optional[Decimal] = Field(None, ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    attributes: Optional[Dict[str, str]] = None
    image: Optional[str] = None


class VariationOut(BaseModel):
    id: int
    product_id: int
    sku: Optional[str] = None
    price: Decimal
    sale_price: Optional[Decimal] = None
    stock_quantity: int
    stock_status: StockStatus
    attributes: Dict[str, str]
    image: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    slug: str
    sku: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Decimal
    sale_price: Optional[Decimal] = None
    status: ProductStatus
    manage_stock: bool
    stock_quantity: int
    stock_status: StockStatus
    allow_backorders: bool
    brand_id: Optional[int] = None
    category_ids: List[str]
    images: List[ProductImage]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
