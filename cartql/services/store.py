import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select, delete
from cartql.core.exceptions import NotFoundError, StorageError
from cartql.models.cart import Cart, CartItem, utcnow

logger = logging.getLogger(__name__)

class CartStore:
    """
    Persistence boundary for carts and their items.

    Quantity changes are issued as single UPDATE statements so concurrent
    increments on the same row are applied by the database, never lost.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Storage failure while trying to %s", action)
            raise StorageError(f"Failed to {action}") from e

    def find_cart_by_id(self, cart_id: str) -> Optional[Cart]:
        with self._guard("load cart"):
            return self.session.get(Cart, cart_id)

    def create_cart(self, cart_id: str) -> Cart:
        with self._guard("create cart"):
            cart = Cart(id=cart_id)
            self.session.add(cart)
            try:
                self.session.commit()
            except IntegrityError:
                # Someone else created it between our lookup and insert
                self.session.rollback()
                existing = self.session.get(Cart, cart_id)
                if existing is None:
                    raise
                return existing
            self.session.refresh(cart)
            return cart

    def list_items(self, cart_id: str) -> List[CartItem]:
        with self._guard("list cart items"):
            return list(self.session.exec(
                select(CartItem)
                .where(CartItem.cart_id == cart_id)
                .order_by(CartItem.created_at)
                .execution_options(populate_existing=True)
            ).all())

    def get_item(self, cart_id: str, item_id: str) -> Optional[CartItem]:
        with self._guard("load cart item"):
            return self.session.exec(
                select(CartItem)
                .where(CartItem.id == item_id, CartItem.cart_id == cart_id)
                .execution_options(populate_existing=True)
            ).first()

    def _increment(self, cart_id: str, item_id: str, delta: int) -> Optional[CartItem]:
        """Apply `quantity += delta` to one row; None when the row does not exist."""
        result = self.session.exec(
            update(CartItem)
            .where(CartItem.id == item_id, CartItem.cart_id == cart_id)
            .values(quantity=CartItem.quantity + delta, updated_at=utcnow())
        )
        matched = result.rowcount
        # Commit even on a miss so the write transaction is never left open
        self.session.commit()
        if matched == 0:
            return None
        return self.get_item(cart_id, item_id)

    def upsert_item(self, cart_id: str, item_id: str, create_fields: Dict[str, Any], increment_by: int) -> CartItem:
        """Increment an existing item by `increment_by`, or create it with that quantity."""
        with self._guard("upsert cart item"):
            item = self._increment(cart_id, item_id, increment_by)
            if item is not None:
                return item

            item = CartItem(id=item_id, cart_id=cart_id, quantity=increment_by, **create_fields)
            self.session.add(item)
            try:
                self.session.commit()
            except IntegrityError:
                # Lost an insert race for the same (item, cart) pair
                self.session.rollback()
                item = self._increment(cart_id, item_id, increment_by)
                if item is None:
                    raise
                return item
            self.session.refresh(item)
            return item

    def update_item_quantity(self, cart_id: str, item_id: str, delta: int) -> CartItem:
        with self._guard("update cart item quantity"):
            item = self._increment(cart_id, item_id, delta)
        if item is None:
            raise NotFoundError("Cart item not found")
        return item

    def delete_item(self, cart_id: str, item_id: str) -> None:
        with self._guard("delete cart item"):
            result = self.session.exec(
                delete(CartItem).where(CartItem.id == item_id, CartItem.cart_id == cart_id)
            )
            deleted = result.rowcount
            self.session.commit()
        if deleted == 0:
            raise NotFoundError("Cart item not found")
