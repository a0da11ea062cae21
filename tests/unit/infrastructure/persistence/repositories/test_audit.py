"""Tests for MongoAuditRepository ping outcome mapping."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from mongorepo.domain.models.audit import DbStatus
from mongorepo.infrastructure.database import Settings
from mongorepo.infrastructure.naming import DefaultNamingHelper
from mongorepo.infrastructure.persistence.repositories.audit import MongoAuditRepository


def _client(command):
    database = MagicMock()
    database.command = command
    client = MagicMock()
    client.__getitem__.return_value = database
    return client


def _audit(client, suffix=""):
    return MongoAuditRepository(client, Settings(environment_suffix=suffix), DefaultNamingHelper())


async def test_check_reports_running_when_ping_succeeds(fake_client):
    status = await _audit(fake_client).check()
    assert status == DbStatus(db_name="admin", running=True)
    assert fake_client["admin"].commands == ["ping"]


async def test_check_resolves_admin_database_through_naming(fake_client):
    status = await _audit(fake_client, suffix="Test").check()
    assert status.db_name == "adminTest"
    assert fake_client["adminTest"].commands == ["ping"]


async def test_check_swallows_timeout():
    client = _client(AsyncMock(side_effect=ServerSelectionTimeoutError("no servers")))
    assert await _audit(client).check() == DbStatus(db_name="admin", running=False)


async def test_check_swallows_authentication_failure():
    client = _client(AsyncMock(side_effect=OperationFailure("auth failed", code=18)))
    status = await _audit(client).check()
    assert status.running is False


async def test_check_logs_failure(caplog):
    client = _client(AsyncMock(side_effect=ServerSelectionTimeoutError("no servers")))
    with caplog.at_level(logging.WARNING):
        await _audit(client).check()
    assert "ping" in caplog.text


async def test_check_reports_negative_status_when_cancelled():
    client = _client(AsyncMock(return_value={"ok": 1.0}))
    cancellation = asyncio.Event()
    cancellation.set()
    status = await _audit(client).check(cancellation=cancellation)
    assert status.running is False


async def test_check_reports_negative_status_when_naming_fails(fake_client):
    class _BrokenNaming(DefaultNamingHelper):
        def resolve_database_name(self, configuration, db_name):
            raise KeyError(db_name)

    audit = MongoAuditRepository(fake_client, Settings(), _BrokenNaming())
    assert await audit.check() == DbStatus(db_name="admin", running=False)
