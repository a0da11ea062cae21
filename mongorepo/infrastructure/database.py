"""MongoDB settings and async Motor client factory."""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connection and naming configuration.

    environment_suffix is appended to every logical database name
    (e.g. "Test" turns "Shop" into "ShopTest"); empty means no suffix.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MONGODB_", extra="ignore")

    connection_string: str = "mongodb://localhost:27017"
    environment_suffix: str = ""
    uuid_representation: str = "standard"


settings = Settings()


def create_client(configuration: Settings | None = None) -> AsyncIOMotorClient:
    """Build a Motor client.  No connection is made until the first operation.

    Dates come back timezone-aware (UTC) so entities round-trip unchanged.
    """
    configuration = configuration or settings
    return AsyncIOMotorClient(
        configuration.connection_string,
        tz_aware=True,
        uuidRepresentation=configuration.uuid_representation,
    )
