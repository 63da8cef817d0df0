"""Mongo health check: ping the configured database."""

from __future__ import annotations

import asyncio
import logging

from mongobundle.config import MongoConfig
from mongobundle.host.environment import HealthCheck
from mongobundle.infra.db.client import MongoClient
from mongobundle.models.health import HealthResult

logger = logging.getLogger(__name__)


class MongoHealthCheck(HealthCheck):
    """Reports whether the configured database answers a ping.

    Never raises: transport errors and timeouts come back as unhealthy
    results. Only reads from the shared client, so concurrent calls are fine.
    """

    def __init__(
        self,
        client: MongoClient,
        config: MongoConfig,
        timeout: float | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._database = config.database
        self._timeout = timeout
        self._log = log or logger

    async def check(self, timeout: float | None = None) -> HealthResult:
        timeout = timeout if timeout is not None else self._timeout
        try:
            await asyncio.wait_for(
                self._client.client[self._database].command("ping"),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            self._log.warning("MongoDB ping on %s timed out after %ss", self._database, timeout)
            return HealthResult.unhealthy(
                f"ping on database {self._database} timed out after {timeout}s"
            )
        except Exception as e:
            self._log.warning("MongoDB ping on %s failed: %s", self._database, e)
            return HealthResult.unhealthy(
                f"ping on database {self._database} failed: {type(e).__name__}: {e}"
            )
        return HealthResult.healthy(f"database {self._database} is reachable")
