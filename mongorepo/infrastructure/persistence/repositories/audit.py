"""Motor implementation of AuditRepository."""

from __future__ import annotations

import asyncio
import logging

from motor.motor_asyncio import AsyncIOMotorClient

from mongorepo.domain.models.audit import DbStatus
from mongorepo.domain.repositories.audit import AuditRepository
from mongorepo.infrastructure.database import Settings
from mongorepo.infrastructure.naming import NamingHelper
from mongorepo.infrastructure.persistence.cancellation import cancellable

logger = logging.getLogger(__name__)

ADMIN_DATABASE = "admin"


class MongoAuditRepository(AuditRepository):
    def __init__(self, client: AsyncIOMotorClient, settings: Settings, naming: NamingHelper) -> None:
        self._client = client
        self._settings = settings
        self._naming = naming

    @property
    def db_name(self) -> str:
        return self._naming.resolve_database_name(self._settings, ADMIN_DATABASE)

    async def check(self, *, cancellation: asyncio.Event | None = None) -> DbStatus:
        """Issue a ping.  Any failure yields running=False instead of raising."""
        db_name = ADMIN_DATABASE
        try:
            db_name = self.db_name
            await cancellable(self._client[db_name].command("ping"), cancellation)
        except Exception as exc:
            logger.warning("MongoDB ping against %r failed: %s", db_name, exc)
            return DbStatus(db_name=db_name, running=False)
        return DbStatus(db_name=db_name, running=True)
