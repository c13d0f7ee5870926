# every model imported here so SQLAlchemy registers it in Base.metadata

from storefront.data.models.admin import AdminModel
from storefront.data.models.brand import BrandModel
from storefront.data.models.product import ProductModel
from storefront.data.models.product_category import ProductCategoryModel
from storefront.data.models.product_variation import ProductVariationModel
from storefront.data.models.customer import CustomerModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.coupon import CouponModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.payment import PaymentModel
from storefront.data.models.shipping_method import ShippingMethodModel

__all__ = [
    "AdminModel",
    "BrandModel",
    "ProductModel",
    "ProductCategoryModel",
    "ProductVariationModel",
    "CustomerModel",
    "CartModel",
    "CartItemModel",
    "CouponModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentModel",
    "ShippingMethodModel",
]
