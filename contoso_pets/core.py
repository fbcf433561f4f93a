# contoso_pets/core.py
import logging
from typing import List

from fastapi import HTTPException

from .database import ProductStore
from .errors import IdMismatchError, ProductValidationError
from .models import Product, ProductIn

# This file contains the logic behind the product endpoints.
# It only talks to the store through the ProductStore interface.

logger = logging.getLogger(__name__)


def _not_found(product_id: int) -> HTTPException:
    logger.info("product %s not found", product_id)
    return HTTPException(status_code=404)


def _bad_request(exc: ProductValidationError) -> HTTPException:
    return HTTPException(status_code=400, detail={"errors": exc.errors})


class ProductHandler:
    def __init__(self, store: ProductStore):
        self.store = store

    async def list_products(self) -> List[Product]:
        return self.store.list()

    async def get_product(self, product_id: int) -> Product:
        p = self.store.get(product_id)
        if p is None:
            raise _not_found(product_id)
        return p

    async def create_product(self, payload: ProductIn) -> Product:
        try:
            p = self.store.insert(payload)
        except ProductValidationError as exc:
            logger.info("rejected new product: %s", exc.errors)
            raise _bad_request(exc)
        logger.info("created product %s (%s, %s)", p.id, p.name, p.price)
        return p

    async def update_product(self, product_id: int, payload: Product) -> None:
        # mismatch is reported before existence, so a mismatched id on a
        # missing product is still a 400
        try:
            replaced = self.store.replace(product_id, payload)
        except IdMismatchError as exc:
            logger.info("id mismatch on update: path %s, body %s", exc.path_id, exc.body_id)
            raise _bad_request(exc)
        except ProductValidationError as exc:
            logger.info("rejected update of product %s: %s", product_id, exc.errors)
            raise _bad_request(exc)
        if not replaced:
            raise _not_found(product_id)
        logger.info("updated product %s", product_id)

    async def delete_product(self, product_id: int) -> None:
        if not self.store.remove(product_id):
            raise _not_found(product_id)
        logger.info("deleted product %s", product_id)
