from __future__ import annotations

from typing import Annotated

import typer

from pinghosts.config import (
    Settings,
    data_dir_from_settings,
    parse_hosts,
    render_settings_toml,
    write_settings,
)
from pinghosts.errors import TooManyHostsError

from .common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(no_args_is_help=True)


def _summarize_hosts(settings: Settings) -> None:
    try:
        result = parse_hosts(settings.hosts)
    except TooManyHostsError as exc:
        typer.echo(f"Hosts: {exc}")
        return

    typer.echo(f"Hosts: {len(result.hosts)} valid, {len(result.rejected)} rejected")
    for rejected in result.rejected:
        typer.echo(f"  {rejected.label}: {rejected.error}")


@app.command("show")
def show_config() -> None:
    """Print the effective configuration and check its host entries."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    typer.echo(f"Config source: {path if exists else 'defaults'}")
    typer.echo(f"Data directory: {data_dir_from_settings(settings)}")
    typer.echo(render_settings_toml(settings))
    _summarize_hosts(settings)


@app.command("init")
def init_config(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write a config file with a commented example host."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path}")
        return

    write_settings(Settings(), path)
    typer.echo(f"Wrote default config to {path}")
