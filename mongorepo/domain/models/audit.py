"""Store connectivity status."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DbStatus(BaseModel):
    """Outcome of a health check.

    db_name is the database the ping was issued against; running is True
    only when the store answered.
    """

    model_config = ConfigDict(frozen=True)

    db_name: str
    running: bool
