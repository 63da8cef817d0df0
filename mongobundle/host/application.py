"""Minimal host runner: bootstrap bundles, start managed objects, poll health."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mongobundle.host.environment import Bootstrap, Environment
from mongobundle.models.health import HealthResult

logger = logging.getLogger(__name__)


class Application:
    """Drives bundles through bootstrap, run, start and shutdown."""

    def __init__(self, configuration: Any, environment: Environment | None = None) -> None:
        self.configuration = configuration
        self.bootstrap = Bootstrap()
        self.environment = environment or Environment()
        self._started = False

    def add_bundle(self, bundle) -> None:
        self.bootstrap.add_bundle(bundle)

    async def setup(self) -> None:
        """Run every bundle, then start managed objects.

        If anything fails, whatever was already started is stopped before the
        error propagates.
        """
        try:
            for bundle in self.bootstrap.bundles:
                bundle.run(self.configuration, self.environment)
            await self.environment.lifecycle.start_all()
        except Exception:
            logger.exception("Application setup failed")
            await self.shutdown()
            raise
        self._started = True
        logger.info("Application started")

    async def shutdown(self) -> None:
        await self.environment.lifecycle.stop_all()
        # Bundles that ran but whose managers never started still own open clients
        for bundle in self.bootstrap.bundles:
            await bundle.stop()
        if self._started:
            logger.info("Application stopped")
        self._started = False

    async def check_health(self) -> dict[str, HealthResult]:
        results = await self.environment.health_checks.run_health_checks()
        for name, result in results.items():
            if result.ok:
                logger.info("Health check %s: ok (%s)", name, result.message)
            else:
                logger.warning("Health check %s: FAILED (%s)", name, result.message)
        return results

    async def serve(self, stop_event: asyncio.Event, health_interval: float | None = None) -> None:
        """Set up, wait for ``stop_event``, then shut down."""
        await self.setup()
        try:
            while not stop_event.is_set():
                if health_interval:
                    await self.check_health()
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=health_interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            await self.shutdown()
