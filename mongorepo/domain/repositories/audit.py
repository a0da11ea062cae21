"""Audit (health-check) repository interface."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from mongorepo.domain.models.audit import DbStatus


class AuditRepository(ABC):
    """Reports whether the store is reachable.

    check() never raises for store failures; it returns a negative status.
    """

    @abstractmethod
    async def check(self, *, cancellation: asyncio.Event | None = None) -> DbStatus:
        """Ping the store and report the outcome."""
