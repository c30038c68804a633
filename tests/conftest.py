import asyncio
import copy
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import ServerSelectionTimeoutError

from eventctg.api.main import create_app
from eventctg.core.config import Settings
from eventctg.core.database import DatabaseManager


@dataclass
class StubInsertOneResult:
    inserted_id: Any
    acknowledged: bool = True


@dataclass
class StubUpdateResult:
    matched_count: int
    upserted_id: Any = None
    acknowledged: bool = True


@dataclass
class StubDeleteResult:
    deleted_count: int
    acknowledged: bool = True


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in query.items())


def _project(document: Dict[str, Any], projection: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not projection:
        return copy.deepcopy(document)
    keep = {key for key, flag in projection.items() if flag}
    keep.add("_id")
    return {key: copy.deepcopy(value) for key, value in document.items() if key in keep}


class StubCursor:
    def __init__(self, documents: List[Dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, key: str, direction: int) -> "StubCursor":
        # Missing and null values order below everything, as in MongoDB.
        def sort_key(document):
            value = document.get(key)
            return (0, "") if value is None else (1, value)

        self._documents = sorted(self._documents, key=sort_key, reverse=direction < 0)
        return self

    def limit(self, count: int) -> "StubCursor":
        self._documents = self._documents[:count]
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        await asyncio.sleep(0)
        if length is None:
            return list(self._documents)
        return list(self._documents[:length])


class StubCollection:
    """Enough of an AsyncIOMotorCollection for the services under test."""

    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def find(self, query: Optional[Dict[str, Any]] = None, projection=None) -> StubCursor:
        self._check()
        query = query or {}
        return StubCursor([_project(doc, projection) for doc in self.documents if _matches(doc, query)])

    async def find_one(self, query: Dict[str, Any], projection=None) -> Optional[Dict[str, Any]]:
        self._check()
        for document in self.documents:
            if _matches(document, query):
                return _project(document, projection)
        return None

    async def insert_one(self, document: Dict[str, Any]) -> StubInsertOneResult:
        self._check()
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return StubInsertOneResult(inserted_id=document["_id"])

    async def update_one(self, query, update, upsert: bool = False) -> StubUpdateResult:
        self._check()
        for document in self.documents:
            if _matches(document, query):
                document.update(copy.deepcopy(update.get("$set", {})))
                return StubUpdateResult(matched_count=1)
        if not upsert:
            return StubUpdateResult(matched_count=0)
        created = {**query, **copy.deepcopy(update.get("$setOnInsert", {})), **copy.deepcopy(update.get("$set", {}))}
        created["_id"] = ObjectId()
        self.documents.append(created)
        return StubUpdateResult(matched_count=0, upserted_id=created["_id"])

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        self._check()
        for document in self.documents:
            if _matches(document, query):
                before = copy.deepcopy(document)
                document.update(copy.deepcopy(update.get("$set", {})))
                return copy.deepcopy(document) if return_document == ReturnDocument.AFTER else before
        return None

    async def delete_one(self, query: Dict[str, Any]) -> StubDeleteResult:
        self._check()
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return StubDeleteResult(deleted_count=1)
        return StubDeleteResult(deleted_count=0)


class StubAdmin:
    def __init__(self, mongo: "StubMongo") -> None:
        self._mongo = mongo

    async def command(self, name: str) -> Dict[str, Any]:
        await asyncio.sleep(0)
        self._mongo.commands.append(name)
        if self._mongo.ping_error is not None:
            raise self._mongo.ping_error
        return {"ok": 1.0}


class StubClient:
    def __init__(self, mongo: "StubMongo", uri: str, options: Dict[str, Any]) -> None:
        self.uri = uri
        self.options = options
        self.admin = StubAdmin(mongo)
        self.closed = False
        self._mongo = mongo

    def __getitem__(self, name: str):
        return self._mongo.databases[name]

    def close(self) -> None:
        self.closed = True


class StubMongo:
    """Shared backing store; every client built by ``factory`` sees the same data."""

    def __init__(self) -> None:
        self.clients: List[StubClient] = []
        self.databases = defaultdict(lambda: defaultdict(StubCollection))
        self.commands: List[str] = []
        self.ping_error: Optional[Exception] = None

    def factory(self, uri: str, **options: Any) -> StubClient:
        client = StubClient(self, uri, options)
        self.clients.append(client)
        return client

    def collection(self, name: str, database: str = "event_ctg") -> StubCollection:
        return self.databases[database][name]

    def fail_connections(self) -> None:
        self.ping_error = ServerSelectionTimeoutError("cluster unreachable")


@pytest.fixture
def mongo() -> StubMongo:
    return StubMongo()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, DB_USER="tester", DB_PASS="p@ss/word", DB_NAME="event_ctg")


@pytest.fixture
def database(settings, mongo) -> DatabaseManager:
    return DatabaseManager(settings, client_factory=mongo.factory)


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
