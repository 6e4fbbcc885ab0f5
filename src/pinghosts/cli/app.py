from __future__ import annotations

from typing import Annotated

import typer

from pinghosts.utils.logging import setup_logging

from . import config as config_cmd
from .accessories import register as register_accessories
from .check import register as register_check
from .hosts import register as register_hosts
from .info import register as register_info
from .init_cmd import register as register_init
from .run import register as register_run

app = typer.Typer(
    help="pinghosts - expose host reachability as device states",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config", help="Show or create the config file")

register_init(app)
register_hosts(app)
register_check(app)
register_accessories(app)
register_run(app)
register_info(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """pinghosts CLI."""
    setup_logging()

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"pinghosts version {get_version('pinghosts')}")
        raise typer.Exit()
