import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

from pymongo import MongoClient
from pymongo.collection import Collection

from .models import Product, ProductCreate

# Record stores for products. The app picks MongoStore when a connection
# string is configured and falls back to the in-memory store otherwise.

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Products kept in a dict for the life of the process, insertion-ordered."""

    def __init__(self):
        self.products: Dict[str, Dict[str, Any]] = {}

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def insert(self, product: ProductCreate) -> Product:
        pid = uuid.uuid4().hex
        self.products[pid] = {"id": pid, **product.model_dump(by_alias=True)}
        return Product(**self.products[pid])

    async def find_all(self) -> List[Product]:
        return [Product(**p) for p in self.products.values()]


class MongoStore:
    """Products stored as documents in a MongoDB collection."""

    def __init__(self, uri: str, database: str = "products", collection: str = "products"):
        self.uri = uri
        self.database_name = database
        self.collection_name = collection
        self._client: Optional[MongoClient] = None
        self._collection: Optional[Collection] = None

    async def connect(self) -> None:
        self._client = MongoClient(self.uri)
        self._collection = self._client[self.database_name][self.collection_name]
        logger.info("using MongoDB collection %s.%s", self.database_name, self.collection_name)

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._collection = None

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            raise RuntimeError("MongoStore is not connected")
        return self._collection

    @staticmethod
    def _to_product(doc: Dict[str, Any]) -> Product:
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return Product(**doc)

    async def insert(self, product: ProductCreate) -> Product:
        doc = product.model_dump(by_alias=True)
        result = await asyncio.to_thread(self.collection.insert_one, doc)
        return Product(id=str(result.inserted_id), **product.model_dump(by_alias=True))

    async def find_all(self) -> List[Product]:
        docs = await asyncio.to_thread(lambda: list(self.collection.find({})))
        return [self._to_product(d) for d in docs]
