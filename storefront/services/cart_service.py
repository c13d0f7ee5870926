# storefront/services/cart_service.py
import uuid
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.repos.cart_repo import CartRepo
from storefront.repos.customer_repo import CustomerRepo
from storefront.services.product_client import ProductClient
from storefront.utils.money import to_money
from storefront.utils.settings import DEFAULT_CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases.
    queries: get by id / session / customer
    commands: create, add, update quantity, remove, clear, assign, merge
    """

    def __init__(self, db: Session, product_client: ProductClient):
        self.repo = CartRepo(db)
        self.customers = CustomerRepo(db)
        self.product_client = product_client

    #query
    def get_cart(self, cart_id: int) -> CartModel:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise NotFoundError(f"Cart with ID {cart_id} not found")
        return cart

    def get_cart_by_session_id(self, session_id: str) -> CartModel:
        cart = self.repo.get_by_session_id(session_id)
        if not cart:
            raise NotFoundError(f"Cart with session ID '{session_id}' not found")
        return cart

    def get_cart_by_customer_id(self, customer_id: int) -> CartModel:
        cart = self.repo.get_by_customer_id(customer_id)
        if not cart:
            raise NotFoundError(f"Cart for customer '{customer_id}' not found")
        return cart

    #commands
    def create_cart(self, customer_id: int | None = None) -> CartModel:
        if customer_id is not None:
            self._require_customer(customer_id)
            if self.repo.get_by_customer_id(customer_id):
                raise ConflictError(f"Customer '{customer_id}' already has a cart")

        cart = CartModel(
            session_id=str(uuid.uuid4()),
            customer_id=customer_id,
            currency=DEFAULT_CURRENCY,
        )
        created = self.repo.create_cart(cart)

        logger.info(f"Created cart {created.id} (session {created.session_id}, customer {customer_id})")
        return created

    def add_item(
        self,
        cart_id: int,
        product_id: str,
        variation_id: str | None,
        quantity: int,
    ) -> CartModel:
        if quantity <= 0:
            raise ValidationFailed("Quantity must be greater than 0")

        cart = self.get_cart(cart_id)
        price = self._current_price(product_id, variation_id)
        return self._add_line(cart, product_id, variation_id, quantity, price)

    def update_item_quantity(
        self,
        cart_id: int,
        product_id: str,
        variation_id: str | None,
        quantity: int,
    ) -> CartModel:
        if quantity <= 0:
            raise ValidationFailed("Quantity must be greater than 0")

        cart = self.get_cart(cart_id)
        item = self._require_item(cart, product_id, variation_id)

        logger.info(f"Cart {cart_id}: product {product_id} quantity {item.quantity} -> {quantity}")
        return self.repo.set_item_quantity(cart, item, quantity)

    def remove_item(self, cart_id: int, product_id: str, variation_id: str | None = None) -> CartModel:
        cart = self.get_cart(cart_id)
        item = self._require_item(cart, product_id, variation_id)

        logger.info(f"Removing product {product_id} from cart {cart_id}")
        return self.repo.remove_item(cart, item)

    def clear_cart(self, cart_id: int) -> CartModel:
        cart = self.get_cart(cart_id)
        logger.info(f"Clearing cart {cart_id}")
        return self.repo.clear_items(cart)

    def assign_to_customer(self, session_id: str, customer_id: int) -> CartModel:
        cart = self.get_cart_by_session_id(session_id)
        self._require_customer(customer_id)

        owned = self.repo.get_by_customer_id(customer_id)
        if owned and owned.id != cart.id:
            logger.warning(f"Customer {customer_id} already owns cart {owned.id}")
            raise ConflictError(f"Customer '{customer_id}' already has a cart")

        logger.info(f"Assigning cart {cart.id} to customer {customer_id}")
        return self.repo.assign_customer(cart, customer_id)

    def merge_guest_cart(self, session_id: str, customer_id: int) -> CartModel:
        """
        Re-adds every guest line to the customer's cart, then drops the guest
        cart. Steps commit one by one, a failure part way leaves both carts.
        """
        guest = self.get_cart_by_session_id(session_id)
        self._require_customer(customer_id)

        target = self.repo.get_by_customer_id(customer_id)
        if target is None:
            target = self.create_cart(customer_id)

        if target.id == guest.id:
            return target

        lines = [(i.product_id, i.variation_id, i.quantity, i.price) for i in guest.items]
        for product_id, variation_id, quantity, price in lines:
            target = self._add_line(target, product_id, variation_id, quantity, price)

        self.repo.delete_cart(guest)
        logger.info(f"Merged guest cart {session_id} ({len(lines)} lines) into cart {target.id}")

        return self.get_cart(target.id)

    def calculate_total(self, cart_id: int) -> Decimal:
        cart = self.repo.refresh_total(self.get_cart(cart_id))
        return to_money(cart.total)

    def delete_cart(self, cart_id: int) -> None:
        cart = self.get_cart(cart_id)
        self.repo.delete_cart(cart)
        logger.info(f"Deleted cart {cart_id}")

    #helpers
    def _add_line(
        self,
        cart: CartModel,
        product_id: str,
        variation_id: str | None,
        quantity: int,
        price: Decimal,
    ) -> CartModel:
        existing = self.repo.find_item(cart, product_id, variation_id)

        if existing:
            new_quantity = existing.quantity + quantity
            logger.info(
                f"Product {product_id} already in cart {cart.id}, "
                f"quantity {existing.quantity} -> {new_quantity}"
            )
            return self.repo.set_item_quantity(cart, existing, new_quantity)

        logger.info(f"Adding product {product_id} to cart {cart.id}")
        return self.repo.add_item(
            cart,
            CartItemModel(
                product_id=product_id,
                variation_id=variation_id,
                quantity=quantity,
                price=to_money(price),
            ),
        )

    def _current_price(self, product_id: str, variation_id: str | None) -> Decimal:
        if variation_id:
            data = self.product_client.fetch_variation(product_id, variation_id)
        else:
            data = self.product_client.fetch_product(product_id)

        # catalogue responses carry sale_price alongside the regular price
        sale_price = data.get("sale_price")
        price = to_money(sale_price if sale_price is not None else data["price"])
        if price < 0:
            raise ValidationFailed(f"Product '{product_id}' has a negative price")
        return price

    def _require_item(self, cart: CartModel, product_id: str, variation_id: str | None) -> CartItemModel:
        item = self.repo.find_item(cart, product_id, variation_id)
        if not item:
            raise NotFoundError(f"Item {product_id} not found in cart {cart.id}")
        return item

    def _require_customer(self, customer_id: int) -> None:
        if not self.customers.get_customer(customer_id):
            raise NotFoundError(f"Customer with ID {customer_id} not found")
