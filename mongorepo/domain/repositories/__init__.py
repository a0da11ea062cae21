"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations live in mongorepo/infrastructure/persistence/ and
are wired at the application boundary via get_mongodb().

Import from this package rather than individual modules to avoid coupling
callers to specific repository module paths.
"""

from .audit import AuditRepository
from .base import ID_FIELD, Filter, Repository, Sort, id_filter

__all__ = [
    "AuditRepository",
    "Filter",
    "ID_FIELD",
    "Repository",
    "Sort",
    "id_filter",
]
