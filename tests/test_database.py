# tests/test_database.py
import logging

import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from product_api.config import Settings
from product_api.database import (
    MemoryProductStore,
    MongoProductStore,
    ProductStore,
    create_store,
)
from product_api.filters import build_product_query

PRODUCTS = [
    {"name": "Chair", "description": "Oak chair", "price": 80.0, "category": "Furniture", "inStock": True, "quantity": 4},
    {"name": "Armchair", "description": "Leather armchair", "price": 450.0, "category": "Furniture", "inStock": False, "quantity": 0},
    {"name": "Lamp", "description": "Floor lamp", "price": 35.0, "category": "Lighting", "inStock": True, "quantity": 12},
]


@pytest.fixture(params=["memory", "mongo"])
def store(request):
    if request.param == "memory":
        return MemoryProductStore()
    collection = AsyncMongoMockClient()["product-db"]["products"]
    return MongoProductStore(collection)


async def _seed(store):
    return [await store.insert(dict(p)) for p in PRODUCTS]


@pytest.mark.asyncio
async def test_insert_assigns_id_and_timestamps(store):
    doc = await store.insert(dict(PRODUCTS[0]))
    assert isinstance(doc["_id"], ObjectId)
    assert doc["createdAt"] == doc["updatedAt"]
    assert (await store.get(doc["_id"]))["name"] == "Chair"


@pytest.mark.asyncio
async def test_find_filters_sorts_and_pages(store):
    await _seed(store)

    query = build_product_query({"category": "Furniture", "sortBy": "price", "sortOrder": "asc"})
    assert [d["name"] for d in await store.find(query)] == ["Chair", "Armchair"]
    assert await store.count(query) == 2

    query = build_product_query({"name": "CHAIR"})
    assert sorted(d["name"] for d in await store.find(query)) == ["Armchair", "Chair"]

    query = build_product_query({"sortBy": "price", "limit": "2", "page": "2"})
    page = await store.find(query)
    assert [d["name"] for d in page] == ["Lamp"]
    assert await store.count(query) == 3


@pytest.mark.asyncio
async def test_default_order_is_newest_first(store):
    await _seed(store)
    docs = await store.find(build_product_query({}))
    assert [d["name"] for d in docs] == ["Lamp", "Armchair", "Chair"]


@pytest.mark.asyncio
async def test_update_sets_fields_and_refreshes_timestamp(store):
    doc = await store.insert(dict(PRODUCTS[2]))
    updated = await store.update(doc["_id"], {"price": 40.0})
    assert updated["price"] == 40.0
    assert updated["name"] == "Lamp"
    assert updated["updatedAt"] >= updated["createdAt"]


@pytest.mark.asyncio
async def test_update_missing_returns_none(store):
    assert await store.update(ObjectId(), {"price": 1.0}) is None


@pytest.mark.asyncio
async def test_delete(store):
    doc = await store.insert(dict(PRODUCTS[0]))
    assert await store.delete(doc["_id"]) is True
    assert await store.delete(doc["_id"]) is False
    assert await store.get(doc["_id"]) is None


@pytest.mark.asyncio
async def test_clear(store):
    await _seed(store)
    await store.clear()
    assert await store.count(build_product_query({})) == 0


@pytest.mark.asyncio
async def test_memory_store_returns_copies():
    store = MemoryProductStore()
    doc = await store.insert(dict(PRODUCTS[0]))
    doc["price"] = -1
    assert (await store.get(doc["_id"]))["price"] == 80.0


def test_create_store_picks_backend():
    assert isinstance(create_store(Settings(store_backend="memory")), MemoryProductStore)
    mongo = create_store(Settings(store_backend="mongo", mongodb_uri="mongodb://db.example:27017/catalog"))
    assert isinstance(mongo, MongoProductStore)
    assert mongo.collection.name == "products"
    assert mongo.collection.database.name == "catalog"


def test_incomplete_store_cannot_be_created():
    class ReadOnlyStore(ProductStore):
        async def find(self, query):
            return []

    with pytest.raises(TypeError):
        ReadOnlyStore()


class _DownDatabase:
    async def command(self, name):
        raise ServerSelectionTimeoutError("no servers available")


class _DownCollection:
    database = _DownDatabase()


@pytest.mark.asyncio
async def test_ping_against_down_server_stays_quiet(caplog):
    store = MongoProductStore(_DownCollection())
    with caplog.at_level(logging.DEBUG, logger="product_api.database"):
        assert await store.ping() is False
    assert all(r.levelno < logging.WARNING for r in caplog.records)
    assert all(r.exc_info is None for r in caplog.records)
