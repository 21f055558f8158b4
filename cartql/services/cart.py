import logging
from typing import List, Optional
from sqlmodel import Session
from cartql.core.exceptions import ValidationError
from cartql.models.cart import Cart, CartItem
from cartql.services.store import CartStore

logger = logging.getLogger(__name__)

class CartService:
    def __init__(self, session: Session, store: Optional[CartStore] = None):
        self.store = store or CartStore(session)

    def ensure_cart(self, cart_id: str) -> Cart:
        """Return the cart with this id, creating it empty on first reference"""
        cart = self.store.find_cart_by_id(cart_id)
        if cart is None:
            cart = self.store.create_cart(cart_id)
            logger.info("Created cart %s", cart_id)
        return cart

    def get_items(self, cart_id: str) -> List[CartItem]:
        return self.store.list_items(cart_id)

    def add_item(
        self,
        cart_id: str,
        item_id: str,
        name: str,
        price: int,
        description: Optional[str] = None,
        image: Optional[str] = None,
        quantity: Optional[int] = None,
    ) -> Cart:
        """Add item to cart or increase its quantity if already present"""
        quantity = quantity or 1
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        if price < 0:
            raise ValidationError("Price must not be negative")

        cart = self.ensure_cart(cart_id)

        # Only used when the item is new; an existing item keeps its details
        create_fields = {
            "name": name,
            "description": description,
            "image": image,
            "price": price,
        }
        item = self.store.upsert_item(cart.id, item_id, create_fields, quantity)
        logger.info("Cart %s: item %s now has quantity %s", cart.id, item_id, item.quantity)

        return cart

    def remove_item(self, cart_id: str, item_id: str) -> Cart:
        cart = self.ensure_cart(cart_id)
        self.store.delete_item(cart.id, item_id)
        logger.info("Cart %s: removed item %s", cart.id, item_id)
        return cart

    def increase_cart_item(self, cart_id: str, item_id: str) -> Cart:
        cart = self.ensure_cart(cart_id)
        self.store.update_item_quantity(cart.id, item_id, 1)
        return cart

    def decrease_cart_item(self, cart_id: str, item_id: str) -> Cart:
        """
        Decrement quantity by one.

        The item is only deleted once its quantity goes negative, so a
        decrement from 1 leaves it in the cart with quantity 0.
        """
        cart = self.ensure_cart(cart_id)
        item = self.store.update_item_quantity(cart.id, item_id, -1)

        if item.quantity < 0:
            self.store.delete_item(cart.id, item_id)
            logger.info("Cart %s: item %s dropped below zero and was removed", cart.id, item_id)

        return cart
