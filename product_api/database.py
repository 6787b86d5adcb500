# product_api/database.py
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from .config import Settings
from .errors import StoreError
from .filters import ProductQuery

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "product-db"


def utcnow() -> datetime:
    # BSON dates carry millisecond precision; truncate so stored and returned values agree
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class ProductStore(ABC):
    """
    Persistence capability handed to the request handlers.

    Documents are plain dicts with an ObjectId "_id" and camelCase fields.
    """

    name = "store"

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def ping(self) -> bool:
        return True

    @abstractmethod
    async def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def find(self, query: ProductQuery) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def count(self, query: ProductQuery) -> int:
        ...

    @abstractmethod
    async def get(self, product_id: ObjectId) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def update(self, product_id: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def delete(self, product_id: ObjectId) -> bool:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...


# ---------------------------
# In-memory store (tests / local demo)
# ---------------------------
class MemoryProductStore(ProductStore):
    name = "memory"

    def __init__(self):
        self._products: Dict[ObjectId, Dict[str, Any]] = {}

    async def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow()
        doc = {**fields, "_id": ObjectId(), "createdAt": now, "updatedAt": now}
        self._products[doc["_id"]] = doc
        return dict(doc)

    async def find(self, query: ProductQuery) -> List[Dict[str, Any]]:
        matching = [p for p in self._products.values() if query.matches(p)]
        matching.sort(key=lambda p: (p[query.sort_by], p["_id"]), reverse=query.descending)
        page = matching[query.skip:query.skip + query.limit]
        return [dict(p) for p in page]

    async def count(self, query: ProductQuery) -> int:
        return sum(1 for p in self._products.values() if query.matches(p))

    async def get(self, product_id: ObjectId) -> Optional[Dict[str, Any]]:
        doc = self._products.get(product_id)
        return dict(doc) if doc else None

    async def update(self, product_id: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self._products.get(product_id)
        if doc is None:
            return None
        doc.update(fields)
        doc["updatedAt"] = utcnow()
        return dict(doc)

    async def delete(self, product_id: ObjectId) -> bool:
        return self._products.pop(product_id, None) is not None

    async def clear(self) -> None:
        self._products.clear()


# ---------------------------
# MongoDB store
# ---------------------------
@contextmanager
def _driver_errors():
    try:
        yield
    except PyMongoError as exc:
        raise StoreError(detail=str(exc)) from exc


class MongoProductStore(ProductStore):
    name = "mongo"

    def __init__(self, collection, client: Optional[AsyncMongoClient] = None):
        self.collection = collection
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoProductStore":
        client = AsyncMongoClient(
            settings.mongodb_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=5000,
        )
        if settings.mongodb_database:
            database = client[settings.mongodb_database]
        else:
            database = client.get_default_database(default=DEFAULT_DATABASE)
        return cls(database[settings.mongodb_collection], client=client)

    async def connect(self) -> None:
        with _driver_errors():
            await self.collection.database.command("ping")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def ping(self) -> bool:
        try:
            await self.collection.database.command("ping")
        except PyMongoError:
            logger.debug("MongoDB ping failed")
            return False
        return True

    async def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow()
        doc = {**fields, "createdAt": now, "updatedAt": now}
        with _driver_errors():
            result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def find(self, query: ProductQuery) -> List[Dict[str, Any]]:
        with _driver_errors():
            cursor = self.collection.find(
                query.to_mongo(),
                sort=query.sort_spec(),
                skip=query.skip,
                limit=query.limit,
            )
            return await cursor.to_list(length=None)

    async def count(self, query: ProductQuery) -> int:
        with _driver_errors():
            return await self.collection.count_documents(query.to_mongo())

    async def get(self, product_id: ObjectId) -> Optional[Dict[str, Any]]:
        with _driver_errors():
            return await self.collection.find_one({"_id": product_id})

    async def update(self, product_id: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        changes = {**fields, "updatedAt": utcnow()}
        with _driver_errors():
            return await self.collection.find_one_and_update(
                {"_id": product_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )

    async def delete(self, product_id: ObjectId) -> bool:
        with _driver_errors():
            result = await self.collection.delete_one({"_id": product_id})
        return result.deleted_count == 1

    async def clear(self) -> None:
        with _driver_errors():
            await self.collection.delete_many({})


def create_store(settings: Settings) -> ProductStore:
    if settings.store_backend == "memory":
        return MemoryProductStore()
    return MongoProductStore.from_settings(settings)
