"""Database and collection lookup by logical name."""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from mongorepo.infrastructure.database import Settings
from mongorepo.infrastructure.naming import NamingHelper


class RepositoryHelper:
    """Resolves physical handles through the configured NamingHelper."""

    def __init__(self, client: AsyncIOMotorClient, settings: Settings, naming: NamingHelper) -> None:
        self.client = client
        self.settings = settings
        self.naming = naming

    def get_database(self, db_name: str) -> AsyncIOMotorDatabase:
        return self.client[self.naming.resolve_database_name(self.settings, db_name)]

    def get_collection(self, db_name: str, collection_name: str) -> AsyncIOMotorCollection:
        database = self.get_database(db_name)
        return database[self.naming.resolve_collection_name(collection_name)]

    def get_collection_for(
        self, document_class: type, db_name: str, collection_name: str | None = None
    ) -> AsyncIOMotorCollection:
        """Like get_collection, defaulting the logical name to the class name."""
        return self.get_collection(db_name, collection_name or document_class.__name__)
