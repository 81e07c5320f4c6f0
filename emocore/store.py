"""
Health record store interface and an in-memory implementation.

The orchestrator only talks to a store through ``HealthStore``. The in-memory
store is used by the HTTP service and the tests, and can be swapped for a
real persistent backend without touching the rest of the package.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Protocol

from .models import HealthRecord


class AuthorizationStatus(str, Enum):
    """Whether the app may write a record type to the store."""

    NOT_DETERMINED = "not_determined"
    SHARING_DENIED = "sharing_denied"
    SHARING_AUTHORIZED = "sharing_authorized"


class HealthStore(Protocol):
    """What the orchestrator needs from a health record store."""

    def is_available(self) -> bool: ...

    def authorization_status(self, record_type: str) -> AuthorizationStatus: ...

    async def save(self, record: HealthRecord) -> None: ...


class InMemoryHealthStore:
    """
    In-memory health record store with live streaming of saved records.

    Saved records are kept in insertion order. Subscribers are woken through
    a condition variable whenever a record is saved.
    """

    def __init__(
        self,
        available: bool = True,
        authorization: AuthorizationStatus = AuthorizationStatus.SHARING_AUTHORIZED,
    ) -> None:
        self.available = available
        self.authorization = authorization
        self._records: list[HealthRecord] = []
        self._condition = asyncio.Condition()

    def is_available(self) -> bool:
        return self.available

    def authorization_status(self, record_type: str) -> AuthorizationStatus:
        return self.authorization

    async def save(self, record: HealthRecord) -> None:
        """
        Persist a record and notify all subscribers.

        Args:
            record: The record to store
        """
        async with self._condition:
            self._records.append(record)
            self._condition.notify_all()

    async def read_all(self) -> list[HealthRecord]:
        """Return every saved record, oldest first."""
        async with self._condition:
            return list(self._records)

    @asynccontextmanager
    async def stream(self) -> AsyncGenerator[AsyncGenerator[HealthRecord, None], None]:
        """
        Stream saved records to a subscriber.

        The yielded generator first replays records saved before subscribing,
        then produces each new record as it is saved.

        Yields:
            An async generator of HealthRecord objects
        """

        async def record_generator() -> AsyncGenerator[HealthRecord, None]:
            seen = 0
            try:
                while True:
                    async with self._condition:
                        await self._condition.wait_for(
                            lambda: len(self._records) > seen
                        )
                        pending = self._records[seen:]
                        seen = len(self._records)

                    for record in pending:
                        yield record

            except (asyncio.CancelledError, GeneratorExit):
                # Subscriber went away
                return

        yield record_generator()
