"""Domain model package.

All domain objects are pure Python / Pydantic models with no driver or
infrastructure dependencies.  Import from this package to avoid coupling
application code to individual module paths.
"""

from .audit import DbStatus
from .documents import Document, Identifiable, utcnow
from .paging import KeyRequest, PagedResult, PageRequest

__all__ = [
    "DbStatus",
    "Document",
    "Identifiable",
    "KeyRequest",
    "PageRequest",
    "PagedResult",
    "utcnow",
]
