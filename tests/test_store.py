"""
Tests for the storage adapter
"""

import pytest
from sqlmodel import SQLModel, Session, create_engine, select
from sqlalchemy.pool import StaticPool
from cartql.core.exceptions import NotFoundError, StorageError
from cartql.models.cart import Cart, CartItem
from cartql.services.cart import CartService
from cartql.services.store import CartStore


@pytest.fixture
def store(session):
    return CartStore(session)


@pytest.fixture
def broken_store():
    """Store whose database has no tables"""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    with Session(engine) as session:
        yield CartStore(session)
    engine.dispose()


FIELDS = {"name": "Tea", "description": None, "image": None, "price": 300}


def test_find_missing_cart(store):
    assert store.find_cart_by_id("missing") is None


def test_create_then_find(store):
    store.create_cart("c1")
    assert store.find_cart_by_id("c1").id == "c1"


def test_upsert_creates_then_increments(store):
    store.create_cart("c1")
    created = store.upsert_item("c1", "i1", FIELDS, 2)
    assert created.quantity == 2

    updated = store.upsert_item("c1", "i1", FIELDS, 3)
    assert updated.quantity == 5
    assert len(store.list_items("c1")) == 1


def test_update_quantity_by_delta(store):
    store.create_cart("c1")
    store.upsert_item("c1", "i1", FIELDS, 1)

    assert store.update_item_quantity("c1", "i1", 4).quantity == 5
    assert store.update_item_quantity("c1", "i1", -2).quantity == 3


def test_update_missing_item(store):
    with pytest.raises(NotFoundError):
        store.update_item_quantity("c1", "i1", 1)


def test_delete_item(store):
    store.create_cart("c1")
    store.upsert_item("c1", "i1", FIELDS, 1)
    store.delete_item("c1", "i1")
    assert store.get_item("c1", "i1") is None


def test_delete_missing_item(store):
    with pytest.raises(NotFoundError):
        store.delete_item("c1", "i1")


def test_list_items_only_for_cart(store):
    store.create_cart("c1")
    store.create_cart("c2")
    store.upsert_item("c1", "i1", FIELDS, 1)
    store.upsert_item("c2", "i2", FIELDS, 1)

    assert [item.id for item in store.list_items("c1")] == ["i1"]


def test_database_failure_is_storage_error(broken_store):
    with pytest.raises(StorageError):
        broken_store.find_cart_by_id("c1")


def test_failed_write_is_storage_error(broken_store):
    with pytest.raises(StorageError):
        broken_store.create_cart("c1")


def test_timestamps_are_timezone_aware(store):
    store.create_cart("c1")
    created = store.upsert_item("c1", "i1", FIELDS, 1)
    assert created.created_at is not None

    # Incrementing stamps updated_at through the UPDATE statement
    updated = store.update_item_quantity("c1", "i1", 1)
    assert updated.quantity == 2
    assert CartItem(id="i2", cart_id="c1", name="Cup", price=100).created_at.tzinfo is not None


@pytest.fixture
def file_engine(tmp_path):
    """File-backed engine so separate sessions use separate connections"""
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


def test_ensure_cart_survives_concurrent_create(file_engine, monkeypatch):
    with Session(file_engine) as session:
        service = CartService(session)
        lookup = service.store.find_cart_by_id

        def lookup_then_lose_race(cart_id):
            found = lookup(cart_id)
            # Another request creates the cart after our lookup
            with Session(file_engine) as other:
                CartStore(other).create_cart(cart_id)
            return found

        monkeypatch.setattr(service.store, "find_cart_by_id", lookup_then_lose_race)

        cart = service.ensure_cart("c1")
        assert cart.id == "c1"

    with Session(file_engine) as session:
        assert len(session.exec(select(Cart)).all()) == 1


def test_upsert_survives_concurrent_insert(file_engine, monkeypatch):
    with Session(file_engine) as session:
        store = CartStore(session)
        store.create_cart("c1")
        increment = store._increment
        calls = []

        def increment_then_lose_race(cart_id, item_id, delta):
            calls.append(delta)
            if len(calls) == 1:
                result = increment(cart_id, item_id, delta)
                # Another request inserts the item before our insert
                with Session(file_engine) as other:
                    CartStore(other).upsert_item(cart_id, item_id, FIELDS, 2)
                return result
            return increment(cart_id, item_id, delta)

        monkeypatch.setattr(store, "_increment", increment_then_lose_race)

        item = store.upsert_item("c1", "i1", FIELDS, 3)

        assert item.quantity == 5
        assert len(calls) == 2

    with Session(file_engine) as session:
        assert len(CartStore(session).list_items("c1")) == 1
