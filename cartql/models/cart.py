from typing import Optional
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Cart(SQLModel, table=True):
    # Caller-supplied, never generated here
    id: str = Field(primary_key=True)

    created_at: datetime = Field(default_factory=utcnow)

class CartItem(SQLModel, table=True):
    # An item id is only unique within its cart
    id: str = Field(primary_key=True)
    cart_id: str = Field(foreign_key="cart.id", primary_key=True)

    # Item Details
    name: str
    description: Optional[str] = None
    image: Optional[str] = None

    # Pricing (minor currency units)
    price: int
    quantity: int = Field(default=1)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
