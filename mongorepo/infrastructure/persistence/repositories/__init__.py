"""Concrete Motor repository implementations.

Exports MongoRepository, MongoAuditRepository and the get_mongodb() factory
used to wire the shared services at the application boundary.
"""

from __future__ import annotations

from dataclasses import dataclass

from motor.motor_asyncio import AsyncIOMotorClient

from mongorepo.infrastructure.database import Settings, create_client
from mongorepo.infrastructure.database import settings as default_settings
from mongorepo.infrastructure.naming import DefaultNamingHelper, NamingHelper
from mongorepo.infrastructure.persistence.helper import RepositoryHelper

from .audit import MongoAuditRepository
from .base import MongoRepository


@dataclass
class MongoDb:
    """Services shared by every repository, bound to one client."""

    settings: Settings
    client: AsyncIOMotorClient
    naming: NamingHelper
    helper: RepositoryHelper
    audit: MongoAuditRepository


def get_mongodb(
    settings: Settings | None = None,
    naming: NamingHelper | None = None,
    client: AsyncIOMotorClient | None = None,
) -> MongoDb:
    """Construct the client, naming resolver, helper and audit repository.

    DefaultNamingHelper is used unless an override is supplied:

        mongo = get_mongodb(naming=TestNamingHelper())
        users = UserRepository.from_helper(mongo.helper, "Shop")
        status = await mongo.audit.check()
    """
    settings = settings or default_settings
    naming = naming or DefaultNamingHelper()
    client = client or create_client(settings)
    return MongoDb(
        settings=settings,
        client=client,
        naming=naming,
        helper=RepositoryHelper(client, settings, naming),
        audit=MongoAuditRepository(client, settings, naming),
    )


__all__ = [
    "MongoAuditRepository",
    "MongoDb",
    "MongoRepository",
    "get_mongodb",
]
