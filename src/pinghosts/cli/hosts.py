from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from pinghosts.models import stable_identifier
from pinghosts.utils.redaction import Redactor

from .common import load_settings_or_exit, parse_hosts_or_exit


def list_hosts(
    redact: bool = typer.Option(
        False,
        "--redact",
        help="Redact addresses in output",
    ),
) -> None:
    """List configured hosts and how each one will be probed."""
    console = Console()
    settings = load_settings_or_exit()
    result = parse_hosts_or_exit(settings)

    if not result.hosts and not result.rejected:
        console.print("No hosts configured.")
        console.print(
            "Add [[hosts]] entries to the config file ('pinghosts config show').",
            markup=False,
        )
        return

    redactor = Redactor(enabled=redact)
    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Identifier", style="dim")
    table.add_column("Address", style="green")
    table.add_column("Source")
    table.add_column("Type", style="yellow")
    table.add_column("Interval")
    table.add_column("Timeout")
    table.add_column("Retries")
    table.add_column("Closed on success")
    table.add_column("Startup as failed")

    for host in result.hosts:
        table.add_row(
            host.name,
            stable_identifier(host.name)[:8],
            redactor.redact_address(host.display_address),
            host.address_source.value,
            host.device_type.value,
            f"{host.interval:g}s",
            f"{host.timeout:g}s",
            str(host.retries),
            "yes" if host.closed_on_success else "no",
            "yes" if host.startup_as_failed else "no",
        )

    console.print(table)
    console.print(f"\n[green]{len(result.hosts)} host(s) configured[/green]")

    if result.rejected:
        console.print(f"\n[red]✗[/red] {len(result.rejected)} host(s) rejected:\n")
        for rejected in result.rejected:
            console.print(f"  [red]•[/red] {rejected.label}: {rejected.error}")
        raise typer.Exit(1)


def register(app: typer.Typer) -> None:
    app.command("hosts")(list_hosts)
