from __future__ import annotations

import typer
from rich.console import Console

from pinghosts.config import MAX_HOSTS

from .common import (
    build_database,
    load_settings_or_exit,
    parse_hosts_or_exit,
    resolve_config_path_or_exit,
)


def register(app: typer.Typer) -> None:
    @app.command()
    def info() -> None:
        """Show pinghosts config and data directory info."""
        settings = load_settings_or_exit()
        result = parse_hosts_or_exit(settings)
        db = build_database(settings)

        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)

        console = Console()

        console.print("[bold]pinghosts Info[/bold]\n")
        console.print(f"Data directory: {db.path}")
        console.print(f"Accessory cache: {db.accessories_path}")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")

        console.print("\n[bold]Statistics[/bold]")
        console.print(f"Configured hosts: {len(result.hosts)} (max {MAX_HOSTS})")
        console.print(f"Rejected hosts: {len(result.rejected)}")

        try:
            cached = db.load_accessories()
        except ValueError as exc:
            console.print(f"[red]Accessory cache unreadable:[/red] {exc}")
        else:
            console.print(f"Cached accessories: {len(cached)}")
