import logging
from typing import Any, Callable

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorClient

from product_catalog.models.product import PRODUCTS_COLLECTION

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the MongoDB client for one application instance.

    connect() and disconnect() are idempotent: calling connect() on an
    already connected handle, or disconnect() on a closed one, does nothing.
    A pre-built client may be passed in, in which case the handle starts
    out connected.
    """

    def __init__(
        self,
        uri: str,
        name: str,
        timeout_ms: int = 5000,
        client: Any = None,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
    ):
        self.uri = uri
        self.name = name
        self.timeout_ms = timeout_ms
        self.client = client
        self._client_factory = client_factory

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    async def connect(self) -> None:
        """
        Create the client and ping the server.

        Raises:
            Whatever the driver raises when the server is unreachable. The
            client is discarded in that case so a later connect() can retry.
        """
        if self.is_connected:
            logger.info("MongoDB already connected")
            return

        # tz_aware so stored timestamps read back as UTC instead of naive
        client = self._client_factory(
            self.uri, serverSelectionTimeoutMS=self.timeout_ms, tz_aware=True
        )
        try:
            await client[self.name].command("ping")
        except Exception as e:
            logger.error(f"MongoDB connection error: {e}")
            client.close()
            raise

        self.client = client
        logger.info(f"MongoDB connected successfully (database '{self.name}')")

    async def disconnect(self) -> None:
        """Close the client if one is open."""
        if not self.is_connected:
            return
        self.client.close()
        self.client = None
        logger.info("MongoDB disconnected successfully")

    async def ping(self) -> bool:
        """Return True if the server answers a ping."""
        if not self.is_connected:
            return False
        await self.client[self.name].command("ping")
        return True

    def get_collection(self, name: str):
        if not self.is_connected:
            raise RuntimeError("Database is not connected")
        return self.client[self.name][name]


def get_database(request: Request) -> Database:
    """Dependency returning the database handle owned by the running app."""
    return request.app.state.database


def get_products_collection(database: Database = Depends(get_database)):
    """Dependency returning the products collection."""
    return database.get_collection(PRODUCTS_COLLECTION)
