"""Generic repository base interface.

Repository[T, K] is the root abstraction for every entity repository.
The MongoDB implementation lives in mongorepo/infrastructure/persistence/
and is wired at the application boundary by get_mongodb().

Design notes:
  - All methods are async to accommodate the async driver (Motor).
  - T is any Identifiable entity; K is its key type.
  - Filters are store filter documents (plain mappings); a None filter
    matches every document.
  - Every method accepts an optional cancellation event.  When the event
    fires before the store answers, the call raises OperationCancelled.
    A write the store has already acknowledged is never rolled back.
  - Store failures propagate unchanged; not-found is reported as None.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from mongorepo.domain.models.documents import Identifiable
from mongorepo.domain.models.paging import PagedResult, PageRequest

if TYPE_CHECKING:
    from pymongo.results import BulkWriteResult, DeleteResult, UpdateResult

T = TypeVar("T", bound=Identifiable)
K = TypeVar("K")

Filter = Mapping[str, Any]
Sort = Sequence[tuple[str, int]]

ID_FIELD = "_id"


def id_filter(id: Any) -> dict[str, Any]:
    """Point-lookup filter on the identifier field."""
    return {ID_FIELD: id}


class Repository(ABC, Generic[T, K]):
    """Abstract CRUD, paging and bulk interface over one collection."""

    @abstractmethod
    async def exists(
        self, filter: Filter | None = None, *, cancellation: asyncio.Event | None = None
    ) -> bool:
        """Return True iff at least one document matches.  Probes with limit 1."""

    async def exists_by_id(self, id: K, *, cancellation: asyncio.Event | None = None) -> bool:
        """Delegate to exists() with an equality filter on the identifier."""
        return await self.exists(id_filter(id), cancellation=cancellation)

    @abstractmethod
    async def insert_many(
        self, entities: Iterable[T], *, cancellation: asyncio.Event | None = None
    ) -> None:
        """Insert entities in a single round trip.  Duplicate ids fail at the store."""

    @abstractmethod
    async def save_or_update(
        self,
        entity: T,
        filter: Filter | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> UpdateResult:
        """Replace the matching document, inserting it when nothing matches.

        filter defaults to equality on the entity's identifier.
        """

    @abstractmethod
    async def get_by_id(
        self,
        id: K,
        transform: Callable[[T], Any] | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> Any:
        """Return the entity with the given id (optionally transformed), or None."""

    @abstractmethod
    async def get_by_ids(
        self,
        ids: Iterable[K],
        transform: Callable[[T], Any] | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> dict[K, Any]:
        """Return every found entity keyed by id, in one round trip."""

    @abstractmethod
    async def get_paged_list(
        self,
        request: PageRequest,
        filter: Filter | None = None,
        sort: Sort | None = None,
        transform: Callable[[T], Any] | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> PagedResult[Any]:
        """Return one page of matches plus the total count.  No sort ⇒ natural order."""

    @abstractmethod
    def iterate(
        self,
        filter: Filter | None = None,
        sort: Sort | None = None,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> AsyncIterator[T]:
        """Stream every matching entity from the store cursor.

        The cancellation event is checked before each entity is handed out.
        """

    @abstractmethod
    async def add(self, entity: T, *, cancellation: asyncio.Event | None = None) -> T:
        """Insert one entity and return it with any store-assigned fields populated."""

    @abstractmethod
    async def update(self, entity: T, *, cancellation: asyncio.Event | None = None) -> T:
        """Replace the stored document with the same id.  A missing document is not an error."""

    @abstractmethod
    async def replace_many(
        self, entities: Iterable[T], *, cancellation: asyncio.Event | None = None
    ) -> BulkWriteResult:
        """Replace each entity by id in one bulk round trip."""

    @abstractmethod
    async def delete_by_id(
        self, id: K, *, cancellation: asyncio.Event | None = None
    ) -> DeleteResult:
        """Remove the document with the given id."""

    @abstractmethod
    async def delete_one(
        self, filter: Filter | None, *, cancellation: asyncio.Event | None = None
    ) -> DeleteResult:
        """Remove the first document matching filter."""

    @abstractmethod
    async def delete_many(
        self, filter: Filter | None, *, cancellation: asyncio.Event | None = None
    ) -> DeleteResult:
        """Remove every document matching filter."""

    async def delete(self, entity: T, *, cancellation: asyncio.Event | None = None) -> DeleteResult:
        """Delegate to delete_by_id using the entity's identifier."""
        return await self.delete_by_id(entity.id, cancellation=cancellation)

    @abstractmethod
    async def delete_all(self, *, cancellation: asyncio.Event | None = None) -> None:
        """Remove the whole physical collection.  Irreversible."""

    @abstractmethod
    async def count(
        self, filter: Filter | None = None, *, cancellation: asyncio.Event | None = None
    ) -> int:
        """Count every matching document.  No limit is applied."""

    @abstractmethod
    async def drop(self, *, cancellation: asyncio.Event | None = None) -> None:
        """Drop the physical collection."""
