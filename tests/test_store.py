# tests/test_store.py
import asyncio
import logging
import random
from decimal import Decimal

import pytest
from fastapi import HTTPException

from contoso_pets.core import ProductHandler
from contoso_pets.database import InMemoryProductStore, seed_products
from contoso_pets.errors import IdMismatchError, ProductValidationError
from contoso_pets.models import MAX_PRICE, MIN_PRICE, Product, ProductIn


def seeded_store():
    store = InMemoryProductStore()
    seed_products(store)
    return store


def test_seed_inserts_two_products_once():
    store = InMemoryProductStore()
    assert seed_products(store) == 2
    assert seed_products(store) == 0
    assert [(p.id, p.name, p.price) for p in store.list()] == [
        (1, "Squeaky Bone", Decimal("20.99")),
        (2, "Knotted Rope", Decimal("12.99")),
    ]


def test_seed_failure_is_logged_not_raised(caplog):
    class BrokenStore(InMemoryProductStore):
        def insert(self, candidate):
            raise RuntimeError("disk on fire")

    with caplog.at_level(logging.ERROR, logger="contoso_pets.database"):
        assert seed_products(BrokenStore()) == 0
    assert "seeding" in caplog.text


def test_insert_then_get_round_trips():
    store = seeded_store()
    p = store.insert(ProductIn(name="Plush Squirrel", price=Decimal("12.99")))
    assert p == Product(id=3, name="Plush Squirrel", price=Decimal("12.99"))
    assert store.get(3) == p


def test_insert_accepts_mappings_and_revalidates():
    store = InMemoryProductStore()
    with pytest.raises(ProductValidationError) as err:
        store.insert({"name": "Plush Squirrel", "price": "0.00"})
    assert list(err.value.errors) == ["price"]

    with pytest.raises(ProductValidationError) as err:
        store.insert({})
    assert set(err.value.errors) == {"name", "price"}
    assert store.count() == 0


def test_ids_strictly_increase():
    store = seeded_store()
    last = 2
    for i in range(10):
        p = store.insert({"name": f"toy {i}", "price": "1.00"})
        assert p.id > last
        last = p.id
        if i % 3 == 0:
            store.remove(p.id)


def test_get_missing_returns_none():
    assert seeded_store().get(404) is None


def test_replace_mismatch_always_rejected():
    store = seeded_store()
    candidate = Product(id=2, name="Knotted Rope", price=Decimal("14.99"))
    # existing, missing and mismatched-with-existing-body ids
    for path_id in (1, 3, 999):
        with pytest.raises(IdMismatchError):
            store.replace(path_id, candidate)
    with pytest.raises(IdMismatchError):
        store.replace(2, {"name": "Knotted Rope", "price": "14.99"})
    assert store.get(2).price == Decimal("12.99")


def test_replace_missing_returns_false():
    store = seeded_store()
    assert store.replace(7, {"id": 7, "name": "x", "price": "1"}) is False


def test_replace_overwrites_all_fields_in_place():
    store = seeded_store()
    assert store.replace(1, {"id": 1, "name": "Squeaky Ball", "price": "21.50"}) is True
    assert store.list()[0] == Product(id=1, name="Squeaky Ball", price=Decimal("21.50"))


def test_remove_then_get_is_absent():
    store = seeded_store()
    assert store.remove(1) is True
    assert store.get(1) is None
    assert store.remove(1) is False


def test_list_length_tracks_creates_and_deletes():
    rng = random.Random(1234)
    store = seeded_store()
    creates = deletes = 0
    for _ in range(200):
        if rng.random() < 0.6:
            store.insert({"name": "toy", "price": "0.01"})
            creates += 1
        else:
            if store.remove(rng.randint(1, creates + 2)):
                deletes += 1
        assert len(store.list()) == 2 + creates - deletes


class DictStore:
    """Minimal alternative store, to show the handler only needs the interface."""

    def __init__(self):
        self.rows = {}

    def list(self):
        return list(self.rows.values())

    def get(self, product_id):
        return self.rows.get(product_id)

    def insert(self, candidate):
        p = Product(id=len(self.rows) + 100, name=candidate.name, price=candidate.price)
        self.rows[p.id] = p
        return p

    def replace(self, product_id, candidate):
        if candidate.id != product_id:
            raise IdMismatchError(product_id, candidate.id)
        if product_id not in self.rows:
            return False
        self.rows[product_id] = candidate
        return True

    def remove(self, product_id):
        return self.rows.pop(product_id, None) is not None

    def count(self):
        return len(self.rows)


def test_handler_works_with_any_store():
    handler = ProductHandler(DictStore())

    async def scenario():
        p = await handler.create_product(ProductIn(name="Leash", price=Decimal("9.99")))
        assert p.id == 100
        assert await handler.get_product(100) == p
        await handler.update_product(100, Product(id=100, name="Leash", price=Decimal("8.99")))
        assert (await handler.list_products())[0].price == Decimal("8.99")
        await handler.delete_product(100)
        with pytest.raises(HTTPException) as err:
            await handler.get_product(100)
        assert err.value.status_code == 404
        with pytest.raises(HTTPException) as err:
            await handler.update_product(1, Product(id=2, name="x", price=Decimal("1")))
        assert err.value.status_code == 400

    asyncio.run(scenario())


def test_price_bounds_in_store():
    store = InMemoryProductStore()
    assert store.insert({"name": "Penny Treat", "price": "0.01"}).price == MIN_PRICE
    assert store.insert({"name": "Gold Bone", "price": MAX_PRICE}).price == MAX_PRICE
    for price in ("0.009", "0", "-1", MAX_PRICE + 1):
        with pytest.raises(ProductValidationError) as err:
            store.insert({"name": "Nope", "price": price})
        assert list(err.value.errors) == ["price"]
    assert store.count() == 2

    with pytest.raises(ProductValidationError):
        store.replace(2, {"id": 2, "name": "Gold Bone", "price": MAX_PRICE + 1})
    assert store.get(2).price == MAX_PRICE


def test_price_that_json_would_round_is_rejected():
    store = InMemoryProductStore()
    with pytest.raises(ProductValidationError) as err:
        store.insert({"name": "Fine Bone", "price": "12345678901234567890.25"})
    assert "price" in err.value.errors


def test_names_are_stripped():
    store = InMemoryProductStore()
    assert store.insert({"name": "  Ball  ", "price": "1"}).name == "Ball"
    with pytest.raises(ProductValidationError) as err:
        store.insert({"name": " \t ", "price": "1"})
    assert "name" in err.value.errors
