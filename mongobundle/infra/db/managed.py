"""Lifecycle adapter that closes the Mongo client on shutdown."""

from __future__ import annotations

import logging

from mongobundle.infra.db.client import MongoClient

logger = logging.getLogger(__name__)


class MongoClientManager:
    """Managed wrapper around a MongoClient.

    ``start()`` does nothing because the driver connects on its own.
    ``stop()`` closes the client once; later calls are no-ops, and errors
    while closing are logged so shutdown can continue.
    """

    def __init__(self, client: MongoClient, log: logging.Logger | None = None) -> None:
        self._client = client
        self._log = log or logger
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def start(self) -> None:
        self._log.debug("Mongo client already connecting, nothing to start")

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        try:
            self._client.close()
        except Exception:
            self._log.exception("Error closing MongoDB client")
