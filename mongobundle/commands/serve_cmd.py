"""CLI handler that keeps the client open until interrupted."""

from __future__ import annotations

import asyncio
import signal

import click

from mongobundle.bundle import MongoBundle
from mongobundle.commands._helpers import get_config, mongo_accessor
from mongobundle.errors import MongoBundleError
from mongobundle.host.application import Application


@click.command("serve")
@click.option("--health-interval", default=30.0, show_default=True, help="Seconds between health checks (0 disables)")
@click.option("--health-timeout", default=5.0, show_default=True, help="Seconds to wait for each health check")
@click.option("--health-check-name", default="mongo", show_default=True)
@click.pass_context
def serve_command(ctx, health_interval: float, health_timeout: float, health_check_name: str):
    """Run the Mongo bundle in the foreground until SIGINT/SIGTERM."""
    config = get_config(ctx)

    async def _serve():
        app = Application(config)
        app.add_bundle(
            MongoBundle(
                mongo_accessor,
                health_check_name=health_check_name,
                health_check_timeout=health_timeout,
            )
        )

        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(signum, stop_event.set)

        click.echo(f"Serving {config.mongo.database} (health check '{health_check_name}')")
        await app.serve(stop_event, health_interval=health_interval or None)
        click.echo("Stopped")

    try:
        asyncio.run(_serve())
    except MongoBundleError as e:
        raise click.ClickException(str(e)) from e
