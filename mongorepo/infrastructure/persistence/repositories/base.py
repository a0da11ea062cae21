"""Motor implementation of Repository[T, K]."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel
from pymongo.results import BulkWriteResult, DeleteResult, UpdateResult

from mongorepo.domain.models.documents import Document
from mongorepo.domain.models.paging import PagedResult, PageRequest
from mongorepo.domain.repositories.base import ID_FIELD, Filter, K, Repository, Sort, T, id_filter
from mongorepo.infrastructure.persistence import queries
from mongorepo.infrastructure.persistence.cancellation import cancellable, raise_if_cancelled
from mongorepo.infrastructure.persistence.helper import RepositoryHelper

R = TypeVar("R", bound="MongoRepository[Any, Any]")


class MongoRepository(Repository[T, K]):
    """Generic repository bound to one physical collection.

    Subclass and set document_class, or pass document_class directly:

        class UserRepository(MongoRepository[User, str]):
            document_class = User

        users = UserRepository.from_helper(helper, "Shop")   # Shop<suffix>.users

    The repository is stateless apart from its database/collection handles
    and is safe to share between concurrent callers.
    """

    document_class: ClassVar[type[Any]]

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        collection_name: str,
        document_class: type[T] | None = None,
    ) -> None:
        if document_class is not None:
            self.document_class = document_class
        elif not hasattr(self, "document_class"):
            raise TypeError(f"{type(self).__name__} needs a document_class")
        self.database = database
        self.collection_name = collection_name
        self.collection = database[collection_name]

    @classmethod
    def from_helper(
        cls: type[R],
        helper: RepositoryHelper,
        database_name: str,
        collection_name: str | None = None,
        document_class: type[Any] | None = None,
    ) -> R:
        """Build the repository with names resolved through the helper's NamingHelper.

        The logical collection name defaults to the document class name.
        """
        document_class = document_class or getattr(cls, "document_class", None)
        if document_class is None:
            raise TypeError(f"{cls.__name__} needs a document_class")
        logical_name = collection_name or document_class.__name__
        return cls(
            helper.get_database(database_name),
            helper.naming.resolve_collection_name(logical_name),
            document_class,
        )

    # ------------------------------------------------------------------ #
    # Mapping                                                              #
    # ------------------------------------------------------------------ #

    def _to_document(self, entity: T) -> dict[str, Any]:
        if isinstance(entity, BaseModel):
            document = entity.model_dump(by_alias=True)
        else:
            document = dict(vars(entity))
            if "id" in document:
                document[ID_FIELD] = document.pop("id")
        if document.get(ID_FIELD, ...) is None:
            del document[ID_FIELD]
        return document

    def _to_domain(self, raw: Any) -> T:
        if issubclass(self.document_class, BaseModel):
            return self.document_class.model_validate(raw)
        fields = dict(raw)
        fields["id"] = fields.pop(ID_FIELD)
        return self.document_class(**fields)

    @staticmethod
    def _assign_id(entity: T, id: Any) -> None:
        if getattr(entity, "id", None) is None:
            entity.id = id  # type: ignore[misc]

    @staticmethod
    @contextmanager
    def _stamped(entities: list[T]) -> Iterator[None]:
        """Touch Document entities, putting the old modified_on back if the write fails."""
        previous = [(e, e.modified_on) for e in entities if isinstance(e, Document)]
        for entity, _ in previous:
            entity.touch()
        try:
            yield
        except BaseException:
            for entity, modified_on in previous:
                entity.modified_on = modified_on
            raise

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    async def exists(
        self, filter: Filter | None = None, *, cancellation: asyncio.Event | None = None
    ) -> bool:
        return await cancellable(queries.exists(self.collection, filter), cancellation)

    async def get_by_id(
        self,
        id: K,
        transform: Callable[[T], Any] | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> Any:
        raw = await cancellable(self.collection.find_one(id_filter(id)), cancellation)
        if raw is None:
            return None
        entity = self._to_domain(raw)
        return transform(entity) if transform else entity

    async def get_by_ids(
        self,
        ids: Iterable[K],
        transform: Callable[[T], Any] | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> dict[K, Any]:
        entities = await cancellable(
            queries.get_by_ids(self.collection, ids, self._to_domain), cancellation
        )
        if transform is None:
            return entities
        return {key: transform(entity) for key, entity in entities.items()}

    async def get_paged_list(
        self,
        request: PageRequest,
        filter: Filter | None = None,
        sort: Sort | None = None,
        transform: Callable[[T], Any] | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> PagedResult[Any]:
        if transform is None:
            mapper = self._to_domain
        else:
            def mapper(raw: Any) -> Any:
                return transform(self._to_domain(raw))

        return await cancellable(
            queries.to_paged_result(self.collection, request, filter, sort, mapper),
            cancellation,
        )

    async def iterate(
        self,
        filter: Filter | None = None,
        sort: Sort | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> AsyncIterator[T]:
        raise_if_cancelled(cancellation)
        async for raw in queries.iterate(self.collection, filter, sort):
            raise_if_cancelled(cancellation)
            yield self._to_domain(raw)

    async def count(
        self, filter: Filter | None = None, *, cancellation: asyncio.Event | None = None
    ) -> int:
        return await cancellable(queries.count(self.collection, filter), cancellation)

    # ------------------------------------------------------------------ #
    # Writes                                                               #
    # ------------------------------------------------------------------ #

    async def add(self, entity: T, *, cancellation: asyncio.Event | None = None) -> T:
        result = await cancellable(
            self.collection.insert_one(self._to_document(entity)), cancellation
        )
        self._assign_id(entity, result.inserted_id)
        return entity

    async def insert_many(
        self, entities: Iterable[T], *, cancellation: asyncio.Event | None = None
    ) -> None:
        batch = list(entities)
        if not batch:
            return
        result = await cancellable(
            self.collection.insert_many([self._to_document(e) for e in batch]), cancellation
        )
        for entity, inserted_id in zip(batch, result.inserted_ids):
            self._assign_id(entity, inserted_id)

    async def save_or_update(
        self,
        entity: T,
        filter: Filter | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> UpdateResult:
        if filter is None:
            # A null _id filter would be copied into the upserted document.
            filter = id_filter(ObjectId() if entity.id is None else entity.id)
        result = await cancellable(
            self.collection.replace_one(filter, self._to_document(entity), upsert=True),
            cancellation,
        )
        if result.upserted_id is not None:
            self._assign_id(entity, result.upserted_id)
        return result

    async def update(self, entity: T, *, cancellation: asyncio.Event | None = None) -> T:
        with self._stamped([entity]):
            await cancellable(
                self.collection.replace_one(id_filter(entity.id), self._to_document(entity)),
                cancellation,
            )
        return entity

    async def replace_many(
        self, entities: Iterable[T], *, cancellation: asyncio.Event | None = None
    ) -> BulkWriteResult:
        batch = list(entities)
        with self._stamped(batch):
            documents = [self._to_document(e) for e in batch]
            return await cancellable(
                queries.replace_many(self.collection, documents), cancellation
            )

    # ------------------------------------------------------------------ #
    # Deletes                                                              #
    # ------------------------------------------------------------------ #

    async def delete_by_id(
        self, id: K, *, cancellation: asyncio.Event | None = None
    ) -> DeleteResult:
        return await cancellable(self.collection.delete_one(id_filter(id)), cancellation)

    async def delete_one(
        self, filter: Filter | None, *, cancellation: asyncio.Event | None = None
    ) -> DeleteResult:
        return await cancellable(self.collection.delete_one(filter or {}), cancellation)

    async def delete_many(
        self, filter: Filter | None, *, cancellation: asyncio.Event | None = None
    ) -> DeleteResult:
        return await cancellable(self.collection.delete_many(filter or {}), cancellation)

    async def delete_all(self, *, cancellation: asyncio.Event | None = None) -> None:
        await self.drop(cancellation=cancellation)

    async def drop(self, *, cancellation: asyncio.Event | None = None) -> None:
        await cancellable(self.database.drop_collection(self.collection_name), cancellation)
