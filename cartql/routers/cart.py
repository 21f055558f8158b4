from contextlib import contextmanager
from typing import List, Optional
import strawberry
from fastapi import Depends
from graphql import GraphQLError
from sqlmodel import Session
from strawberry.fastapi import BaseContext, GraphQLRouter
from strawberry.types import Info
from cartql.core.exceptions import CartError
from cartql.db.session import get_session
from cartql.models.cart import CartItem
from cartql.services import pricing
from cartql.services.cart import CartService
from cartql.services.checkout import CheckoutService, StripeGateway, get_payment_gateway
from cartql.services.currency import CurrencyCode

CurrencyCodeEnum = strawberry.enum(CurrencyCode, name="CurrencyCode")

class Context(BaseContext):
    def __init__(self, session: Session, gateway: StripeGateway):
        super().__init__()
        self.cart_service = CartService(session)
        self.checkout_service = CheckoutService(session, gateway)

async def get_context(
    session: Session = Depends(get_session),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> Context:
    return Context(session, gateway)

@contextmanager
def client_errors():
    """Expose domain errors to GraphQL clients with their error code"""
    try:
        yield
    except CartError as e:
        raise GraphQLError(e.message, extensions={"code": e.code}) from e

# Types

@strawberry.type(name="Money")
class MoneyType:
    amount: int
    formatted: str

    @classmethod
    def from_money(cls, money: pricing.Money) -> "MoneyType":
        return cls(amount=money.amount, formatted=money.formatted)

@strawberry.type(name="CartItem")
class CartItemType:
    id: strawberry.ID
    name: str
    description: Optional[str]
    image: Optional[str]
    quantity: int
    model: strawberry.Private[CartItem]

    @classmethod
    def from_model(cls, item: CartItem) -> "CartItemType":
        return cls(
            id=strawberry.ID(item.id),
            name=item.name,
            description=item.description,
            image=item.image,
            quantity=item.quantity,
            model=item,
        )

    @strawberry.field
    def unit_total(self, currency: Optional[CurrencyCodeEnum] = None) -> MoneyType:
        return MoneyType.from_money(pricing.unit_total(self.model, currency))

    @strawberry.field
    def line_total(self, currency: Optional[CurrencyCodeEnum] = None) -> MoneyType:
        return MoneyType.from_money(pricing.line_total(self.model, currency))

@strawberry.type(name="Cart")
class CartType:
    id: strawberry.ID

    @strawberry.field
    def items(self, info: Info[Context, None]) -> List[CartItemType]:
        with client_errors():
            items = info.context.cart_service.get_items(self.id)
        return [CartItemType.from_model(item) for item in items]

    @strawberry.field
    def total_items(self, info: Info[Context, None]) -> int:
        with client_errors():
            items = info.context.cart_service.get_items(self.id)
        return pricing.total_item_count(items)

    @strawberry.field
    def sub_total(self, info: Info[Context, None], currency: Optional[CurrencyCodeEnum] = None) -> MoneyType:
        with client_errors():
            items = info.context.cart_service.get_items(self.id)
        return MoneyType.from_money(pricing.sub_total(items, currency))

@strawberry.type(name="CheckoutSession")
class CheckoutSessionType:
    id: strawberry.ID
    url: Optional[str]

# Inputs

@strawberry.input
class AddToCartInput:
    cart_id: strawberry.ID
    id: strawberry.ID
    name: str
    price: int
    description: Optional[str] = None
    image: Optional[str] = None
    quantity: Optional[int] = 1

@strawberry.input
class RemoveFromCartInput:
    id: strawberry.ID
    cart_id: strawberry.ID

@strawberry.input
class IncreaseCartItemInput:
    id: strawberry.ID
    cart_id: strawberry.ID

@strawberry.input
class DecreaseCartItemInput:
    id: strawberry.ID
    cart_id: strawberry.ID

@strawberry.input
class CreateCheckoutSessionInput:
    cart_id: strawberry.ID

# Operations

@strawberry.type
class Query:
    @strawberry.field
    def cart(self, info: Info[Context, None], id: strawberry.ID) -> CartType:
        with client_errors():
            cart = info.context.cart_service.ensure_cart(id)
        return CartType(id=strawberry.ID(cart.id))

@strawberry.type
class Mutation:
    @strawberry.mutation
    def add_item(self, info: Info[Context, None], input: AddToCartInput) -> CartType:
        with client_errors():
            cart = info.context.cart_service.add_item(
                cart_id=input.cart_id,
                item_id=input.id,
                name=input.name,
                price=input.price,
                description=input.description,
                image=input.image,
                quantity=input.quantity,
            )
        return CartType(id=strawberry.ID(cart.id))

    @strawberry.mutation
    def remove_item(self, info: Info[Context, None], input: RemoveFromCartInput) -> CartType:
        with client_errors():
            cart = info.context.cart_service.remove_item(input.cart_id, input.id)
        return CartType(id=strawberry.ID(cart.id))

    @strawberry.mutation
    def increase_cart_item(self, info: Info[Context, None], input: IncreaseCartItemInput) -> CartType:
        with client_errors():
            cart = info.context.cart_service.increase_cart_item(input.cart_id, input.id)
        return CartType(id=strawberry.ID(cart.id))

    @strawberry.mutation
    def decrease_cart_item(self, info: Info[Context, None], input: DecreaseCartItemInput) -> CartType:
        with client_errors():
            cart = info.context.cart_service.decrease_cart_item(input.cart_id, input.id)
        return CartType(id=strawberry.ID(cart.id))

    @strawberry.mutation
    def create_checkout_session(
        self, info: Info[Context, None], input: CreateCheckoutSessionInput
    ) -> Optional[CheckoutSessionType]:
        with client_errors():
            checkout = info.context.checkout_service.create_checkout_session(input.cart_id)
        return CheckoutSessionType(id=strawberry.ID(checkout.id), url=checkout.url)

schema = strawberry.Schema(query=Query, mutation=Mutation)

router = GraphQLRouter(schema, context_getter=get_context)
