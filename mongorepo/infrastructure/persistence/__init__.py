"""Persistence package.

Exports the Motor repository implementations, the repository helper and
the get_mongodb() composition root.
"""

from mongorepo.infrastructure.persistence.cancellation import OperationCancelled
from mongorepo.infrastructure.persistence.helper import RepositoryHelper
from mongorepo.infrastructure.persistence.repositories import (
    MongoAuditRepository,
    MongoDb,
    MongoRepository,
    get_mongodb,
)

__all__ = [
    "MongoAuditRepository",
    "MongoDb",
    "MongoRepository",
    "OperationCancelled",
    "RepositoryHelper",
    "get_mongodb",
]
