"""Paging value objects.

PageRequest  — zero-based page index and page size (size >= 1)
PagedResult  — one materialised page plus the total count across all pages
KeyRequest   — a request carrying a single document key
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")
KeyT = TypeVar("KeyT")


class PageRequest(BaseModel):
    """Pagination input.

    page_size is at least 1, so page-count arithmetic never divides by zero.
    """

    model_config = ConfigDict(frozen=True)

    page_index: int = Field(default=0, ge=0)
    page_size: int = Field(default=10, ge=1)

    @property
    def skip(self) -> int:
        """Number of records preceding this page."""
        return self.page_index * self.page_size


class PagedResult(BaseModel, Generic[T]):
    """A single page of results.

    total_count is the number of matches across all pages and is
    independent of the length of result.  Derived values (total_pages,
    has_next_page, has_previous_page) are serialised with the model.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    page_index: int = Field(ge=0)
    page_size: int = Field(ge=1)
    result: list[T] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        pages = self.total_count // self.page_size
        if self.total_count % self.page_size != 0:
            pages += 1
        return pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page_index + 1 < self.total_pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page_index > 0


class KeyRequest(BaseModel, Generic[KeyT]):
    """Request body carrying the key of a single document."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: KeyT
