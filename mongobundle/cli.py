"""Click CLI definitions - main entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from mongobundle.commands.config_cmd import config_group
from mongobundle.commands.health_cmd import health_command
from mongobundle.commands.serve_cmd import serve_command


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.toml",
)
@click.pass_context
def cli(ctx, debug: bool, config_path: Path | None) -> None:
    """mongobundle - managed MongoDB client with health checks."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = config_path


cli.add_command(config_group, "config")
cli.add_command(health_command, "health")
cli.add_command(serve_command, "serve")


if __name__ == "__main__":
    cli()
