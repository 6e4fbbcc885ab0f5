from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console

from pinghosts.bridge import AccessoryBridge
from pinghosts.core import AccessoryRegistry, MonitorSupervisor
from pinghosts.core.collaborators import arp_lookup, icmp_probe

from .common import build_database, load_settings_or_exit, parse_hosts_or_exit

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    @app.command()
    def run() -> None:
        """Monitor all configured hosts until interrupted."""
        console = Console()
        settings = load_settings_or_exit()
        result = parse_hosts_or_exit(settings)
        db = build_database(settings)

        for rejected in result.rejected:
            console.print(
                f"[yellow]![/yellow] Skipping {rejected.label}: {rejected.error}"
            )

        bridge = AccessoryBridge()
        registry = AccessoryRegistry(bridge, db)
        try:
            registry.load()
        except ValueError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(1) from None

        reconciled = registry.reconcile(result.hosts)
        logger.info(
            "Accessories: %d created, %d updated, %d removed",
            len(reconciled.created),
            len(reconciled.updated),
            len(reconciled.removed),
        )

        if not result.hosts:
            console.print("No hosts to monitor.")
            return

        supervisor = MonitorSupervisor(bridge, probe=icmp_probe, lookup=arp_lookup)
        console.print(f"Monitoring {len(result.hosts)} host(s).")
        console.print("Press Ctrl+C to stop.\n")

        try:
            asyncio.run(supervisor.run_forever(list(registry.records.values())))
        except KeyboardInterrupt:
            console.print("\n[green]Monitoring stopped.[/green]")
