"""CLI handlers for config commands."""

from __future__ import annotations

import click

from mongobundle.commands._helpers import get_config
from mongobundle.config import init_config


@click.group("config")
def config_group():
    """Manage configuration."""
    pass


@config_group.command("init")
@click.pass_context
def config_init(ctx):
    """Create default configuration file."""
    path = init_config((ctx.obj or {}).get("config_path"))
    click.echo(f"Configuration created at: {path}")


@config_group.command("show")
@click.pass_context
def config_show(ctx):
    """Show current configuration."""
    config = get_config(ctx)
    mongo = config.mongo
    click.echo(f"Config file: {config.config_path}")
    click.echo(f"  Database: {mongo.database}")
    click.echo(f"  Write concern: {mongo.write_concern}")
    click.echo("  Seeds:")
    for seed in mongo.seeds:
        click.echo(f"    {seed.address}")
    if mongo.credentials is None:
        click.echo("  Credentials: none")
    else:
        mechanism = mongo.auth_mechanism or "default"
        click.echo(f"  Credentials: {mongo.credentials.username} / ******** ({mechanism})")
