# storefront/repos/cart_repo.py
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.utils.money import money_sum


class CartRepo:
    """
    Every mutation recomputes the cart total from its lines before commit,
    so total == sum(price * quantity) holds for whatever is persisted.
    """

    def __init__(self, db: Session):
        self.db = db

    #query
    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_by_session_id(self, session_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.session_id == session_id)
        ).scalar_one_or_none()

    def get_by_customer_id(self, customer_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.customer_id == customer_id)
            .order_by(CartModel.id)
            .limit(1)
        ).scalar_one_or_none()

    @staticmethod
    def find_item(cart: CartModel, product_id: str, variation_id: str | None) -> CartItemModel | None:
        # no variation given only matches a line without variation
        for item in cart.items:
            if item.product_id == product_id and item.variation_id == variation_id:
                return item
        return None

    #commands
    def create_cart(self, cart: CartModel) -> CartModel:
        cart.total = self._recalculate(cart)
        self.db.add(cart)
        return self._save(cart)

    def add_item(self, cart: CartModel, item: CartItemModel) -> CartModel:
        cart.items.append(item)
        return self._save(cart)

    def set_item_quantity(self, cart: CartModel, item: CartItemModel, quantity: int) -> CartModel:
        item.quantity = quantity
        return self._save(cart)

    def remove_item(self, cart: CartModel, item: CartItemModel) -> CartModel:
        cart.items.remove(item)
        return self._save(cart)

    def clear_items(self, cart: CartModel) -> CartModel:
        cart.items.clear()
        return self._save(cart)

    def assign_customer(self, cart: CartModel, customer_id: int) -> CartModel:
        cart.customer_id = customer_id
        return self._save(cart)

    def refresh_total(self, cart: CartModel) -> CartModel:
        return self._save(cart)

    def delete_cart(self, cart: CartModel) -> None:
        self.db.delete(cart)
        self.db.commit()

    def _save(self, cart: CartModel) -> CartModel:
        cart.total = self._recalculate(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    @staticmethod
    def _recalculate(cart: CartModel) -> Decimal:
        return money_sum(Decimal(str(i.price)) * i.quantity for i in cart.items)
