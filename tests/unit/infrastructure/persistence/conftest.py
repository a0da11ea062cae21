"""In-memory, Motor-shaped collection and database doubles.

Only the driver surface the repositories use is modelled: top-level
equality filters, $in, skip/limit/sort cursors, replace with upsert,
bulk ReplaceOne, deletes, counts and drop.  Results are PyMongo's own
result classes so assertions read the same as against a real server.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest
from bson import ObjectId
from pymongo.errors import BulkWriteError, DuplicateKeyError
from pymongo.results import (
    BulkWriteResult,
    DeleteResult,
    InsertManyResult,
    InsertOneResult,
    UpdateResult,
)


def _matches(document: dict[str, Any], filter: dict[str, Any]) -> bool:
    for key, expected in filter.items():
        if isinstance(expected, dict) and "$in" in expected:
            if document.get(key) not in expected["$in"]:
                return False
        elif document.get(key) != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents
        self._skip = 0
        self._limit = 0
        self._sort: list[tuple[str, int]] = []

    def skip(self, n: int) -> FakeCursor:
        self._skip = n
        return self

    def limit(self, n: int) -> FakeCursor:
        self._limit = n
        return self

    def sort(self, keys: list[tuple[str, int]]) -> FakeCursor:
        self._sort = list(keys)
        return self

    def _materialise(self) -> list[dict[str, Any]]:
        documents = list(self._documents)
        for key, direction in reversed(self._sort):
            documents.sort(key=lambda d: d.get(key), reverse=direction < 0)
        documents = documents[self._skip:]
        if self._limit:
            documents = documents[: self._limit]
        return [copy.deepcopy(d) for d in documents]

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        documents = self._materialise()
        return documents[:length] if length else documents

    async def __aiter__(self):
        for document in self._materialise():
            yield document


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []

    def _find(self, filter: dict[str, Any]) -> list[dict[str, Any]]:
        return [d for d in self.documents if _matches(d, filter)]

    def _index_of(self, id: Any) -> int | None:
        for i, document in enumerate(self.documents):
            if document["_id"] == id:
                return i
        return None

    def find(self, filter: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor(self._find(filter or {}))

    async def find_one(self, filter: dict[str, Any]) -> dict[str, Any] | None:
        found = self._find(filter)
        return copy.deepcopy(found[0]) if found else None

    async def count_documents(self, filter: dict[str, Any], limit: int = 0) -> int:
        n = len(self._find(filter))
        return min(n, limit) if limit else n

    def _insert(self, document: dict[str, Any]) -> Any:
        document.setdefault("_id", ObjectId())
        if self._index_of(document["_id"]) is not None:
            raise DuplicateKeyError(f"E11000 duplicate key error: {document['_id']!r}")
        self.documents.append(copy.deepcopy(document))
        return document["_id"]

    async def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        return InsertOneResult(self._insert(document), acknowledged=True)

    async def insert_many(self, documents: list[dict[str, Any]]) -> InsertManyResult:
        if not documents:
            raise TypeError("documents must be a non-empty list")
        inserted = []
        for document in documents:
            try:
                inserted.append(self._insert(document))
            except DuplicateKeyError as exc:
                raise BulkWriteError(
                    {"writeErrors": [{"code": 11000, "errmsg": str(exc)}], "nInserted": len(inserted)}
                ) from exc
        return InsertManyResult(inserted, acknowledged=True)

    def _replace(self, filter: dict[str, Any], replacement: dict[str, Any], upsert: bool) -> dict[str, Any]:
        found = self._find(filter)
        if found:
            i = self.documents.index(found[0])
            new = copy.deepcopy(replacement)
            new.setdefault("_id", found[0]["_id"])
            modified = int(self.documents[i] != new)
            self.documents[i] = new
            return {"n": 1, "nModified": modified}
        if upsert:
            new = copy.deepcopy(replacement)
            new.setdefault("_id", filter.get("_id", ObjectId()))
            self.documents.append(new)
            return {"n": 1, "nModified": 0, "upserted": new["_id"]}
        return {"n": 0, "nModified": 0}

    async def replace_one(
        self, filter: dict[str, Any], replacement: dict[str, Any], upsert: bool = False
    ) -> UpdateResult:
        return UpdateResult(self._replace(filter, replacement, upsert), acknowledged=True)

    async def bulk_write(self, requests: list[Any]) -> BulkWriteResult:
        matched = modified = 0
        upserted = []
        for index, request in enumerate(requests):
            raw = self._replace(request._filter, request._doc, bool(request._upsert))
            if "upserted" in raw:
                upserted.append({"index": index, "_id": raw["upserted"]})
            else:
                matched += raw["n"]
                modified += raw["nModified"]
        return BulkWriteResult(
            {
                "nInserted": 0,
                "nUpserted": len(upserted),
                "nMatched": matched,
                "nModified": modified,
                "nRemoved": 0,
                "upserted": upserted,
            },
            acknowledged=True,
        )

    async def delete_one(self, filter: dict[str, Any]) -> DeleteResult:
        found = self._find(filter)
        if found:
            self.documents.remove(found[0])
        return DeleteResult({"n": len(found[:1])}, acknowledged=True)

    async def delete_many(self, filter: dict[str, Any]) -> DeleteResult:
        found = self._find(filter)
        for document in found:
            self.documents.remove(document)
        return DeleteResult({"n": len(found)}, acknowledged=True)


class FakeDatabase:
    def __init__(self, name: str = "Shop") -> None:
        self.name = name
        self.collections: dict[str, FakeCollection] = {}
        self.commands: list[str] = []

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(name))

    async def drop_collection(self, name: str) -> None:
        collection = self.collections.pop(name, None)
        if collection is not None:
            collection.documents.clear()

    async def command(self, name: str) -> dict[str, Any]:
        self.commands.append(name)
        return {"ok": 1.0}


class FakeClient:
    def __init__(self) -> None:
        self.databases: dict[str, FakeDatabase] = {}

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase(name))


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()
