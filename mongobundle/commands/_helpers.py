"""CLI helpers shared by the commands."""

from __future__ import annotations

import click

from mongobundle.config import AppConfig, load_config
from mongobundle.errors import ConfigurationError


def get_config(ctx: click.Context) -> AppConfig:
    """Load configuration from the path given on the command line, or the default."""
    path = (ctx.obj or {}).get("config_path")
    try:
        return load_config(path)
    except ConfigurationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


def mongo_accessor(config: AppConfig):
    return config.mongo
