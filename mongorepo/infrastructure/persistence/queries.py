"""Stateless query algorithms over a Motor collection.

These functions hold the paging, bulk and lookup logic shared by every
repository.  They work on raw store documents; mapping to entities is the
caller's concern (pass a transform).

    to_paged_result
        → paged               (skip/limit on the cursor, not executed)
        → asyncio.gather      (sliced fetch ∥ unlimited count)
        → PagedResult
    replace_many
        → one ReplaceOne per document, keyed on _id
        → a single bulk_write round trip
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Iterable, Mapping
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorCursor
from pymongo import ReplaceOne
from pymongo.results import BulkWriteResult

from mongorepo.domain.models.paging import PagedResult, PageRequest
from mongorepo.domain.repositories.base import ID_FIELD, Filter, Sort, id_filter

logger = logging.getLogger(__name__)

RawDocument = Mapping[str, Any]


def _identity(document: Any) -> Any:
    return document


def paged(cursor: AsyncIOMotorCursor, request: PageRequest) -> AsyncIOMotorCursor:
    """Restrict cursor to the page described by request, without executing it."""
    return cursor.skip(request.skip).limit(request.page_size)


def paged_range(cursor: AsyncIOMotorCursor, start: int, end: int) -> AsyncIOMotorCursor:
    """Restrict cursor to the 1-based inclusive window [start, end]."""
    if start < 1 or end < start:
        raise ValueError(f"Invalid range [{start}, {end}]: need 1 <= start <= end")
    skip = start - 1
    return cursor.skip(skip).limit(end - skip)


async def to_paged_result(
    collection: AsyncIOMotorCollection,
    request: PageRequest,
    filter: Filter | None = None,
    sort: Sort | None = None,
    transform: Callable[[RawDocument], Any] | None = None,
) -> PagedResult[Any]:
    """Fetch one page and the total match count concurrently.

    With no sort the store's natural order is kept.  If either query fails
    the other is cancelled and the failure propagates unchanged.
    """
    filter = filter or {}
    transform = transform or _identity

    cursor = collection.find(filter)
    if sort:
        cursor = cursor.sort(list(sort))
    cursor = paged(cursor, request)

    logger.debug(
        "Paging %s: filter=%s skip=%d limit=%d",
        collection.name, filter, request.skip, request.page_size,
    )
    fetch = asyncio.ensure_future(cursor.to_list(length=request.page_size))
    total = asyncio.ensure_future(collection.count_documents(filter))
    try:
        documents, total_count = await asyncio.gather(fetch, total)
    except BaseException:
        fetch.cancel()
        total.cancel()
        raise

    return PagedResult(
        page_index=request.page_index,
        page_size=request.page_size,
        result=[transform(document) for document in documents],
        total_count=total_count,
    )


async def exists(collection: AsyncIOMotorCollection, filter: Filter | None = None) -> bool:
    """Probe for at least one match; the store stops counting at one."""
    return await collection.count_documents(filter or {}, limit=1) > 0


async def count(collection: AsyncIOMotorCollection, filter: Filter | None = None) -> int:
    """Count every match.  Unbounded: may scan the whole collection."""
    return await collection.count_documents(filter or {})


async def get_by_ids(
    collection: AsyncIOMotorCollection,
    ids: Iterable[Any],
    transform: Callable[[RawDocument], Any] | None = None,
) -> dict[Any, Any]:
    """Return found documents keyed by _id, fetched in one round trip."""
    transform = transform or _identity
    keys = list(ids)
    if not keys:
        return {}
    documents = await collection.find({ID_FIELD: {"$in": keys}}).to_list(length=None)
    return {document[ID_FIELD]: transform(document) for document in documents}


async def iterate(
    collection: AsyncIOMotorCollection,
    filter: Filter | None = None,
    sort: Sort | None = None,
) -> AsyncIterator[RawDocument]:
    """Yield every matching document as the cursor streams batches in."""
    cursor = collection.find(filter or {})
    if sort:
        cursor = cursor.sort(list(sort))
    async for document in cursor:
        yield document


def build_replace_requests(documents: Iterable[RawDocument]) -> list[ReplaceOne]:
    """One replace operation per document, keyed on its _id."""
    return [ReplaceOne(id_filter(document[ID_FIELD]), document) for document in documents]


def empty_bulk_write_result() -> BulkWriteResult:
    return BulkWriteResult(
        {
            "nInserted": 0,
            "nUpserted": 0,
            "nMatched": 0,
            "nModified": 0,
            "nRemoved": 0,
            "upserted": [],
        },
        acknowledged=True,
    )


async def replace_many(
    collection: AsyncIOMotorCollection, documents: Iterable[RawDocument]
) -> BulkWriteResult:
    """Replace each document by _id in a single bulk_write round trip.

    Per-item outcomes are reported through the result counts; a document
    whose _id no longer exists is simply not matched.  Duplicate ids in
    one batch have store-defined outcome.
    """
    requests = build_replace_requests(documents)
    if not requests:
        return empty_bulk_write_result()
    logger.debug("Bulk replacing %d document(s) in %s", len(requests), collection.name)
    return await collection.bulk_write(requests)
