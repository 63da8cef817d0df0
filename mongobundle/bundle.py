"""MongoBundle: wires configuration, client, lifecycle and health check into a host."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from mongobundle.errors import ConfigurationError, MongoBundleError, NotYetInitializedError
from mongobundle.infra.db.client import MongoClient, build_client
from mongobundle.infra.db.health import MongoHealthCheck
from mongobundle.infra.db.managed import MongoClientManager

if TYPE_CHECKING:
    from mongobundle.config import MongoConfig
    from mongobundle.host.environment import Bootstrap, Environment

logger = logging.getLogger(__name__)

DEFAULT_HEALTH_CHECK_NAME = "mongo"

ConfigurationAccessor = Callable[[Any], "MongoConfig"]


class BundleState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    STOPPED = "stopped"


class MongoBundle:
    """Entry point a host calls during startup.

    ``configuration_accessor`` extracts the MongoConfig from whatever
    configuration object the host uses. ``run()`` builds the client and
    registers a lifecycle manager and a health check with the host
    environment; the client is then available from ``client``.
    """

    def __init__(
        self,
        configuration_accessor: ConfigurationAccessor | None,
        health_check_name: str = DEFAULT_HEALTH_CHECK_NAME,
        health_check_timeout: float | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        if configuration_accessor is None:
            raise ConfigurationError("configuration accessor is required.")
        if not callable(configuration_accessor):
            raise ConfigurationError("configuration accessor must be callable.")
        if not health_check_name:
            raise ConfigurationError("health check name must not be empty.")
        if health_check_timeout is not None and health_check_timeout <= 0:
            raise ConfigurationError("health check timeout must be positive.")
        self._accessor = configuration_accessor
        self._health_check_name = health_check_name
        self._health_check_timeout = health_check_timeout
        self._log = log or logger
        self._state = BundleState.UNINITIALIZED
        self._client: MongoClient | None = None
        self._manager: MongoClientManager | None = None

    @property
    def state(self) -> BundleState:
        # The host lifecycle may stop the manager directly
        if self._state is BundleState.RUNNING and self._manager is not None and self._manager.stopped:
            return BundleState.STOPPED
        return self._state

    @property
    def health_check_name(self) -> str:
        return self._health_check_name

    def initialize(self, bootstrap: Bootstrap) -> None:
        """Nothing to register before configuration is available."""

    def run(self, configuration: Any, environment: Environment) -> None:
        if self._state is not BundleState.UNINITIALIZED:
            raise MongoBundleError(f"MongoBundle cannot run from state {self._state.value}")

        mongo_config = self._accessor(configuration)
        if mongo_config is None:
            raise ConfigurationError("configuration accessor returned no mongo configuration.")

        client = build_client(mongo_config, self._log)
        manager = MongoClientManager(client, self._log)
        health_check = MongoHealthCheck(
            client, mongo_config, timeout=self._health_check_timeout, log=self._log
        )
        try:
            environment.health_checks.register(self._health_check_name, health_check)
        except Exception:
            client.close()
            raise
        try:
            environment.lifecycle.manage(manager)
        except Exception:
            environment.health_checks.unregister(self._health_check_name)
            client.close()
            raise

        self._client = client
        self._manager = manager
        self._state = BundleState.RUNNING
        self._log.info("Mongo bundle running, health check registered as %s", self._health_check_name)

    async def stop(self) -> None:
        """Close the client. Calling it again, or before run(), does nothing."""
        if self.state is not BundleState.RUNNING or self._manager is None:
            return
        await self._manager.stop()
        self._state = BundleState.STOPPED

    @property
    def client(self) -> MongoClient:
        if self.state is BundleState.UNINITIALIZED or self._client is None:
            raise NotYetInitializedError("Mongo client is not available until the bundle has run.")
        if self.state is BundleState.STOPPED or self._client.closed:
            raise NotYetInitializedError("Mongo client has been closed.")
        return self._client

    def get_client(self) -> MongoClient:
        return self.client
