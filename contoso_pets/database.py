# contoso_pets/database.py
import logging
import threading
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Protocol, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .errors import IdMismatchError, ProductValidationError
from .models import Product, ProductIn

# This file holds the in-memory product store and its seed data.

logger = logging.getLogger(__name__)

Candidate = Union[BaseModel, Mapping[str, Any]]
M = TypeVar("M", bound=BaseModel)

SEED_PRODUCTS = [
    ("Squeaky Bone", Decimal("20.99")),
    ("Knotted Rope", Decimal("12.99")),
]


class ProductStore(Protocol):
    """Everything the handler needs from a product store."""

    def list(self) -> List[Product]: ...

    def get(self, product_id: int) -> Optional[Product]: ...

    def insert(self, candidate: Candidate) -> Product: ...

    def replace(self, product_id: int, candidate: Candidate) -> bool: ...

    def remove(self, product_id: int) -> bool: ...

    def count(self) -> int: ...


def _validate(model: Type[M], candidate: Candidate) -> M:
    if isinstance(candidate, BaseModel):
        data = candidate.model_dump()
    else:
        data = dict(candidate)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ProductValidationError.from_pydantic(exc) from exc


class InMemoryProductStore:
    """
    Products keyed by id, kept in insertion order.

    A single lock guards the mapping and the id counter, so concurrent
    inserts never share an id and readers never see a partial update.
    Ids are never reused, even after a delete.
    """

    def __init__(self) -> None:
        self._products: Dict[int, Product] = {}
        self._last_id = 0
        self._lock = threading.Lock()

    def list(self) -> List[Product]:
        with self._lock:
            return [p for p in self._products.values()]

    def get(self, product_id: int) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def count(self) -> int:
        with self._lock:
            return len(self._products)

    def insert(self, candidate: Candidate) -> Product:
        fields = _validate(ProductIn, candidate)
        with self._lock:
            self._last_id += 1
            product = Product(id=self._last_id, name=fields.name, price=fields.price)
            self._products[product.id] = product
        return product

    def replace(self, product_id: int, candidate: Candidate) -> bool:
        if isinstance(candidate, BaseModel):
            body_id = getattr(candidate, "id", None)
        else:
            body_id = candidate.get("id")
        if body_id != product_id:
            raise IdMismatchError(product_id, body_id)
        product = _validate(Product, candidate)
        with self._lock:
            if product_id not in self._products:
                return False
            # overwrite in place so the record keeps its position in list()
            self._products[product_id] = product
        return True

    def remove(self, product_id: int) -> bool:
        with self._lock:
            return self._products.pop(product_id, None) is not None


def seed_products(store: ProductStore) -> int:
    """
    Insert the starter products if the store is empty.

    Returns the number of records inserted. Failures are logged and
    swallowed so a bad seed never stops the service from starting.
    """
    try:
        if store.count() > 0:
            logger.info("store already has products, skipping seed")
            return 0
        for name, price in SEED_PRODUCTS:
            store.insert({"name": name, "price": price})
        logger.info("seeded %d products", len(SEED_PRODUCTS))
        return len(SEED_PRODUCTS)
    except Exception:
        logger.exception("an error occurred seeding the product store")
        return 0
