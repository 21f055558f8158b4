import logging
from typing import Any, Dict, List, Optional
import stripe
from pydantic import BaseModel
from sqlmodel import Session
from cartql.core.config import settings
from cartql.core.exceptions import PaymentProviderError, ValidationError
from cartql.models.cart import CartItem
from cartql.services.currency import CurrencyCode
from cartql.services.pricing import DEFAULT_CURRENCY
from cartql.services.store import CartStore

logger = logging.getLogger(__name__)

class CheckoutSession(BaseModel):
    id: str
    url: Optional[str] = None

class StripeGateway:
    """Creates hosted checkout sessions on Stripe."""

    def __init__(self, api_key: str = settings.STRIPE_SECRET_KEY):
        self.api_key = api_key

    def create_checkout_session(
        self,
        line_items: List[Dict[str, Any]],
        mode: str,
        metadata: Dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                line_items=line_items,
                mode=mode,
                metadata=metadata,
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as e:
            logger.error("Stripe checkout session creation failed: %s", e)
            raise PaymentProviderError(str(e) or "Payment provider request failed") from e

        return CheckoutSession(id=session.id, url=session.url)

def get_payment_gateway() -> StripeGateway:
    return StripeGateway()

def to_line_item(item: CartItem, currency: CurrencyCode = DEFAULT_CURRENCY) -> Dict[str, Any]:
    """Map a cart item to Stripe's `line_items` entry shape"""
    product_data: Dict[str, Any] = {
        "name": item.name,
        "images": [item.image] if item.image else [],
    }
    if item.description:
        product_data["description"] = item.description

    return {
        "quantity": item.quantity,
        "price_data": {
            "currency": currency.value.lower(),
            "unit_amount": item.price,
            "product_data": product_data,
        },
    }

class CheckoutService:
    def __init__(self, session: Session, gateway: StripeGateway, store: Optional[CartStore] = None):
        self.gateway = gateway
        self.store = store or CartStore(session)

    def create_checkout_session(self, cart_id: str) -> CheckoutSession:
        cart = self.store.find_cart_by_id(cart_id)
        if not cart:
            raise ValidationError("Invalid cart")

        items = self.store.list_items(cart_id)
        if not items:
            raise ValidationError("Cart is empty")

        checkout = self.gateway.create_checkout_session(
            line_items=[to_line_item(item) for item in items],
            mode="payment",
            metadata={"cartId": cart_id},
            success_url=settings.CHECKOUT_SUCCESS_URL,
            cancel_url=settings.CHECKOUT_CANCEL_URL,
        )
        logger.info("Created checkout session %s for cart %s", checkout.id, cart_id)
        return checkout
