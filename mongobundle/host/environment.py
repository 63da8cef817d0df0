"""Host-side registries that bundles plug into: lifecycle and health checks."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mongobundle.models.health import HealthResult

if TYPE_CHECKING:
    from mongobundle.bundle import MongoBundle

logger = logging.getLogger(__name__)


@runtime_checkable
class Managed(Protocol):
    """An object whose start/stop is driven by the host lifecycle."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...


class HealthCheck(ABC):
    """A named probe polled by the host."""

    @abstractmethod
    async def check(self) -> HealthResult:
        """Run the probe. Implementations report failure as an unhealthy result."""


class LifecycleEnvironment:
    """Starts managed objects in registration order, stops them in reverse."""

    def __init__(self) -> None:
        self._managed: list[Managed] = []
        self._started: list[Managed] = []

    def manage(self, managed: Managed) -> None:
        if not isinstance(managed, Managed):
            raise TypeError(f"{type(managed).__name__} does not implement start()/stop()")
        self._managed.append(managed)

    @property
    def managed_objects(self) -> list[Managed]:
        return list(self._managed)

    async def start_all(self) -> None:
        for managed in self._managed:
            if managed in self._started:
                continue
            await managed.start()
            self._started.append(managed)
            logger.debug("Started %s", type(managed).__name__)

    async def stop_all(self) -> None:
        """Stop everything that was started. Errors are logged, not raised."""
        while self._started:
            managed = self._started.pop()
            try:
                await managed.stop()
                logger.debug("Stopped %s", type(managed).__name__)
            except Exception:
                logger.exception("Error stopping %s", type(managed).__name__)


class HealthCheckRegistry:
    """Named health checks, run individually or all at once."""

    def __init__(self) -> None:
        self._checks: dict[str, HealthCheck] = {}

    def register(self, name: str, check: HealthCheck) -> None:
        if name in self._checks:
            raise ValueError(f"Health check '{name}' already registered")
        self._checks[name] = check
        logger.debug("Registered health check %s", name)

    def unregister(self, name: str) -> None:
        self._checks.pop(name, None)

    def names(self) -> list[str]:
        return sorted(self._checks)

    def get(self, name: str) -> HealthCheck | None:
        return self._checks.get(name)

    async def run_health_check(self, name: str) -> HealthResult:
        check = self._checks.get(name)
        if check is None:
            raise KeyError(name)
        return await self._run(name, check)

    async def run_health_checks(self) -> dict[str, HealthResult]:
        """Run every registered check concurrently."""
        names = self.names()
        results = await asyncio.gather(*(self._run(n, self._checks[n]) for n in names))
        return dict(zip(names, results))

    async def _run(self, name: str, check: HealthCheck) -> HealthResult:
        try:
            return await check.check()
        except Exception as e:
            logger.warning("Health check %s raised: %s", name, e)
            return HealthResult.unhealthy(f"{type(e).__name__}: {e}")


class Environment:
    """What a bundle sees at run time."""

    def __init__(
        self,
        lifecycle: LifecycleEnvironment | None = None,
        health_checks: HealthCheckRegistry | None = None,
    ) -> None:
        self.lifecycle = lifecycle or LifecycleEnvironment()
        self.health_checks = health_checks or HealthCheckRegistry()


class Bootstrap:
    """Pre-configuration phase: collects bundles before configuration is read."""

    def __init__(self) -> None:
        self._bundles: list[MongoBundle] = []

    @property
    def bundles(self) -> list[MongoBundle]:
        return list(self._bundles)

    def add_bundle(self, bundle: MongoBundle) -> None:
        bundle.initialize(self)
        self._bundles.append(bundle)
