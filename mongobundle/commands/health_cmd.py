"""CLI handler for a one-shot health check."""

from __future__ import annotations

import asyncio

import click

from mongobundle.bundle import MongoBundle
from mongobundle.commands._helpers import get_config, mongo_accessor
from mongobundle.errors import MongoBundleError
from mongobundle.host.application import Application


@click.command("health")
@click.option("--timeout", default=5.0, show_default=True, help="Seconds to wait for each check")
@click.pass_context
def health_command(ctx, timeout: float):
    """Connect, run every health check once and report."""
    config = get_config(ctx)

    async def _check():
        app = Application(config)
        app.add_bundle(MongoBundle(mongo_accessor, health_check_timeout=timeout))
        await app.setup()
        try:
            return await app.check_health()
        finally:
            await app.shutdown()

    try:
        results = asyncio.run(_check())
    except MongoBundleError as e:
        raise click.ClickException(str(e)) from e

    healthy = True
    for name, result in results.items():
        status = "ok" if result.ok else "FAILED"
        click.echo(f"{name}: {status} - {result.message}")
        healthy = healthy and result.ok
    if not healthy:
        ctx.exit(1)
