# Import all models to register them with SQLModel
from cartql.models.cart import Cart, CartItem

__all__ = [
    "Cart",
    "CartItem",
]
