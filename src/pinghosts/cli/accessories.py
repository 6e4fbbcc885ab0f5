from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from .common import build_database, load_settings_or_exit


def list_accessories() -> None:
    """List accessories remembered from previous runs."""
    settings = load_settings_or_exit()
    db = build_database(settings)
    console = Console()

    try:
        records = db.load_accessories()
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from None

    if not records:
        console.print("No accessories cached.")
        console.print("Run 'pinghosts run' to register the configured hosts.")
        return

    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Identifier", style="dim")
    table.add_column("Type", style="yellow")
    table.add_column("Capabilities")

    for record in sorted(records.values(), key=lambda item: item.name):
        table.add_row(
            record.name,
            record.identifier,
            record.host.device_type.value,
            ", ".join(sorted(kind.value for kind in record.capabilities)),
        )

    console.print(table)


def register(app: typer.Typer) -> None:
    app.command("accessories")(list_accessories)
