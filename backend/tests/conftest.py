"""
Shoe Store Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_collection:   AsyncMock standing in for an AsyncCollection
    ├── fake_collection:   In-memory collection with MongoDB CRUD semantics
    ├── sample_shoe_data:  Request body for a complete shoe
    ├── test_client:       HTTPX AsyncClient bound to an app using fake_collection
    └── make_test_client:  Builds a client with custom settings / collection
"""

import os
from contextlib import asynccontextmanager
from copy import deepcopy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

# Set before any shoestore import so the settings singleton never sees a real deployment
os.environ["MONGODB_URL"] = "mongodb://localhost:27017"
os.environ["MONGODB_DATABASE"] = "shoeStore_test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import ReturnDocument

from shoestore.config import Settings
from shoestore.main import create_app


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Collection
# ══════════════════════════════════════════════════════════════════════════

class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._documents if length is None else self._documents[:length]


class FakeShoeCollection:
    """
    Enough of AsyncCollection for ShoeService, backed by a list of dicts.

    Set `error` to an exception instance to make every operation raise it.
    """

    full_name = "shoeStore_test.shoes"

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None
        self.database = SimpleNamespace(command=self._command)

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in query.items())

    @staticmethod
    def _project(document: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
        result = deepcopy(document)
        for key, include in (projection or {}).items():
            if not include:
                result.pop(key, None)
        return result

    async def _command(self, name: str) -> Dict[str, Any]:
        self._check()
        return {"ok": 1.0}

    async def create_index(self, keys, **kwargs) -> str:
        self._check()
        return kwargs.get("name", "index")

    async def insert_one(self, document: Dict[str, Any]):
        self._check()
        # Same side effect as the real driver
        document.setdefault("_id", ObjectId())
        self.documents.append(deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    def find(self, query: Dict[str, Any], projection: Optional[Dict[str, int]] = None) -> FakeCursor:
        self._check()
        return FakeCursor(
            [self._project(d, projection) for d in self.documents if self._matches(d, query)]
        )

    async def find_one(self, query: Dict[str, Any], projection: Optional[Dict[str, int]] = None):
        self._check()
        for document in self.documents:
            if self._matches(document, query):
                return self._project(document, projection)
        return None

    async def find_one_and_update(
        self,
        query: Dict[str, Any],
        update: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
        return_document: bool = ReturnDocument.BEFORE,
    ):
        self._check()
        for document in self.documents:
            if self._matches(document, query):
                before = self._project(document, projection)
                document.update(update.get("$set", {}))
                if return_document == ReturnDocument.AFTER:
                    return self._project(document, projection)
                return before
        return None

    async def delete_one(self, query: Dict[str, Any]):
        self._check()
        for index, document in enumerate(self.documents):
            if self._matches(document, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_collection():
    """
    Provides a mock AsyncCollection.

    `find` is synchronous on the real collection (it returns a cursor whose
    to_list is awaited), so it is a MagicMock here.

    Usage:
        mock_collection.find_one.return_value = {"id": "abc", "name": "Runner"}
        result = await ShoeService(mock_collection).get_shoe("abc")
    """
    collection = AsyncMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.delete_one = AsyncMock()
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    return collection


@pytest.fixture
def fake_collection():
    return FakeShoeCollection()


@pytest.fixture
def sample_shoe_data():
    return {"name": "Air Zoom", "brand": "Nike", "size": 42, "price": 129.99}


@pytest.fixture
def make_test_client():
    """
    Builds an HTTPX AsyncClient for an app with custom settings.

    Usage:
        async with make_test_client(fake_collection, decode_error_status=400) as client:
            response = await client.post("/create", content=b"{")
    """

    @asynccontextmanager
    async def _make(collection, **overrides):
        app = create_app(settings=Settings(**overrides), collection=collection)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    return _make


@pytest_asyncio.fixture
async def test_client(make_test_client, fake_collection):
    """
    Provides an async HTTP test client talking to the app in-process.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/getall")
            assert response.status_code == 200
    """
    async with make_test_client(fake_collection) as client:
        yield client
