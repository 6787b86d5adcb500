# product_api/handlers.py
import logging
from contextlib import contextmanager
from typing import Any, Dict, Mapping, Optional

from bson import ObjectId

from .database import ProductStore
from .errors import InvalidProductIdError, ProductNotFoundError, StoreError
from .filters import build_product_query
from .models import Product, clean_product

logger = logging.getLogger(__name__)

# This file contains the core logic for the product endpoints.
# Every function takes the store explicitly and returns the response envelope.


def parse_product_id(product_id: str) -> ObjectId:
    if not ObjectId.is_valid(product_id):
        raise InvalidProductIdError(product_id)
    return ObjectId(product_id)


@contextmanager
def _store_call(message: str):
    try:
        yield
    except StoreError as exc:
        logger.exception(message)
        raise StoreError(message, detail=exc.detail) from exc


def _envelope(doc: Mapping[str, Any]) -> Dict[str, Any]:
    return {"status": "success", "data": Product.from_document(doc).to_json()}


async def create_product_logic(store: ProductStore, payload: Any) -> Dict[str, Any]:
    fields = clean_product(payload)
    with _store_call("Failed to create product"):
        doc = await store.insert(fields)
    logger.info("Created product %s", doc["_id"])
    return _envelope(doc)


async def list_products_logic(store: ProductStore, params: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    query = build_product_query(params)
    with _store_call("Failed to fetch products"):
        docs = await store.find(query)
        total = await store.count(query)
    return {
        "status": "success",
        "results": len(docs),
        "total": total,
        "page": query.page,
        "limit": query.limit,
        "totalPages": query.total_pages(total),
        "data": [Product.from_document(d).to_json() for d in docs],
    }


async def get_product_logic(store: ProductStore, product_id: str) -> Dict[str, Any]:
    oid = parse_product_id(product_id)
    with _store_call("Failed to fetch product"):
        doc = await store.get(oid)
    if doc is None:
        raise ProductNotFoundError()
    return _envelope(doc)


async def update_product_logic(store: ProductStore, product_id: str, payload: Any) -> Dict[str, Any]:
    oid = parse_product_id(product_id)
    fields = clean_product(payload, partial=True)
    with _store_call("Failed to update product"):
        doc = await store.update(oid, fields)
    if doc is None:
        raise ProductNotFoundError()
    logger.info("Updated product %s (%s)", oid, ", ".join(sorted(fields)) or "no fields")
    return _envelope(doc)


async def delete_product_logic(store: ProductStore, product_id: str) -> None:
    oid = parse_product_id(product_id)
    with _store_call("Failed to delete product"):
        deleted = await store.delete(oid)
    if not deleted:
        raise ProductNotFoundError()
    logger.info("Deleted product %s", oid)
