"""Database connectivity layer for EventCTG."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from eventctg.core.config import Settings
from eventctg.core.exceptions import ConnectivityError

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"
USERS_COLLECTION = "users"

ClientFactory = Callable[..., Any]


@dataclass(frozen=True)
class Collections:
    events: AsyncIOMotorCollection
    users: AsyncIOMotorCollection


class DatabaseManager:
    """Lazily establishes a single MongoDB connection and memoizes its collections.

    The first call to :meth:`acquire` connects under a lock; every later call
    returns the cached handles. A failed connect leaves the manager
    unconnected so the next request retries.
    """

    def __init__(self, settings: Settings, client_factory: ClientFactory = AsyncIOMotorClient) -> None:
        self._settings = settings
        self._client_factory = client_factory
        self._lock = asyncio.Lock()
        self.client: Optional[Any] = None
        self._collections: Optional[Collections] = None

    @property
    def is_connected(self) -> bool:
        return self._collections is not None

    async def acquire(self) -> Collections:
        """Return the events/users handles, connecting on first use."""

        if self._collections is not None:
            return self._collections

        async with self._lock:
            if self._collections is None:
                self._collections = await self._connect()
            return self._collections

    async def _connect(self) -> Collections:
        logger.info("Connecting to MongoDB database %s", self._settings.DB_NAME)
        client = self._client_factory(
            self._settings.mongodb_uri,
            server_api=ServerApi("1", strict=True, deprecation_errors=True),
            serverSelectionTimeoutMS=self._settings.DB_SERVER_SELECTION_TIMEOUT_MS,
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as exc:
            client.close()
            logger.error("MongoDB connection failed: %s", exc)
            raise ConnectivityError(f"Unable to connect to document store: {exc}") from exc

        database = client[self._settings.DB_NAME]
        self.client = client
        logger.info("MongoDB connected")
        return Collections(
            events=database[EVENTS_COLLECTION],
            users=database[USERS_COLLECTION],
        )

    async def ping(self) -> None:
        """Issue a liveness probe, connecting first if needed."""

        await self.acquire()
        try:
            await self.client.admin.command("ping")
        except PyMongoError as exc:
            raise ConnectivityError(str(exc)) from exc

    async def close(self) -> None:
        """Tear down the connection if one was opened."""

        if self.client is None:
            return

        logger.info("Closing MongoDB connection")
        client = self.client
        self.client = None
        self._collections = None
        client.close()
