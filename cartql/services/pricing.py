from typing import Iterable, Optional
from pydantic import BaseModel
from cartql.core.config import settings
from cartql.models.cart import CartItem
from cartql.services.currency import CURRENCY_FORMATS, CurrencyCode, format_money, to_currency_code

DEFAULT_CURRENCY = to_currency_code(settings.DEFAULT_CURRENCY)

class Money(BaseModel):
    amount: int
    formatted: str

def to_money(amount: int, currency: Optional[CurrencyCode] = None) -> Money:
    formatted = format_money(amount, currency or DEFAULT_CURRENCY, CURRENCY_FORMATS)
    return Money(amount=amount, formatted=formatted)

# Quantity is taken as stored everywhere: no fallback value is substituted,
# so count and subtotal always agree about a zero-quantity item.

def unit_total(item: CartItem, currency: Optional[CurrencyCode] = None) -> Money:
    return to_money(item.price, currency)

def line_total(item: CartItem, currency: Optional[CurrencyCode] = None) -> Money:
    return to_money(item.price * item.quantity, currency)

def total_item_count(items: Iterable[CartItem]) -> int:
    return sum(item.quantity for item in items)

def sub_total(items: Iterable[CartItem], currency: Optional[CurrencyCode] = None) -> Money:
    amount = sum(item.price * item.quantity for item in items)
    return to_money(amount, currency)
