"""Entity base contract.

Identifiable is the capability every persisted record exposes: an ``id``
of a hashable, equality-comparable key type that the store can index.
Document is the convenience Pydantic base most entities extend.

The identifier is stored under ``_id``; both ``id=`` and ``_id=`` are
accepted on construction so that raw store documents validate directly.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

KeyT = TypeVar("KeyT")


def utcnow() -> datetime:
    """Current UTC time truncated to the millisecond precision BSON dates keep."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@runtime_checkable
class Identifiable(Protocol):
    """Anything carrying a unique identifier usable in a point-lookup filter."""

    @property
    def id(self) -> Any: ...


class Document(BaseModel, Generic[KeyT]):
    """Base for persisted records.

    created_on is set once, at construction (UTC).
    modified_on stays None until the record is first updated.
    id may be left None for ObjectId-keyed documents; the store assigns
    one on insert and the repository writes it back.
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: KeyT = Field(alias="_id")
    created_on: datetime = Field(default_factory=utcnow)
    modified_on: datetime | None = None

    def touch(self) -> None:
        """Mark the record as modified now."""
        self.modified_on = utcnow()
