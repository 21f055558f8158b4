"""Pytest configuration and fixtures"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from cartql.main import app
from cartql.db.session import get_session
from cartql.services.cart import CartService
from cartql.services.checkout import CheckoutSession, get_payment_gateway


class FakeGateway:
    """Records checkout requests instead of calling Stripe"""

    def __init__(self):
        self.calls = []
        self.error = None

    def create_checkout_session(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return CheckoutSession(id="cs_test_123", url="https://checkout.stripe.com/c/pay/cs_test_123")


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def cart_service(session):
    return CartService(session)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(session, gateway):
    """TestClient with the database session and payment gateway swapped out"""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()
