"""Physical database and collection naming.

NamingHelper maps logical names to the names used in the store so that
environment separation and pluralisation live in one place.  Any
implementation is substitutable; DefaultNamingHelper is supplied by the
composition root when the caller provides none.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import inflect

from mongorepo.infrastructure.database import Settings


class NamingHelper(ABC):
    @abstractmethod
    def resolve_database_name(self, configuration: Settings, db_name: str) -> str:
        """Return the physical database name for a logical one."""

    @abstractmethod
    def resolve_collection_name(self, collection_name: str) -> str:
        """Return the physical collection name for a logical one."""


class DefaultNamingHelper(NamingHelper):
    """Suffix databases with the environment; pluralise and lower-case collections.

    resolve_collection_name("User") == "users"
    resolve_database_name(Settings(environment_suffix="Test"), "Shop") == "ShopTest"
    """

    def __init__(self) -> None:
        self._inflect = inflect.engine()

    def resolve_database_name(self, configuration: Settings, db_name: str) -> str:
        return f"{db_name}{configuration.environment_suffix}"

    def resolve_collection_name(self, collection_name: str) -> str:
        if not collection_name:
            raise ValueError("collection_name must be a non-empty string")
        return self._inflect.plural_noun(collection_name.lower())
