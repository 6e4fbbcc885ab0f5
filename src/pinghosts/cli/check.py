from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console

from pinghosts.core import AddressResolver, LivenessProber, map_state
from pinghosts.core.collaborators import arp_lookup, icmp_probe
from pinghosts.errors import ResolutionError
from pinghosts.models import HostConfig, ProbeOutcome, ResolvedTarget

from .common import load_settings_or_exit, parse_hosts_or_exit

logger = logging.getLogger(__name__)


async def _run_cycle(host: HostConfig) -> tuple[ResolvedTarget, ProbeOutcome]:
    target = await AddressResolver(host, lookup=arp_lookup).resolve()
    prober = LivenessProber(host.name, host.timeout, host.retries, icmp_probe)
    return target, await prober.run(target)


def check(
    name: str = typer.Argument(..., help="Configured host name"),
) -> None:
    """Run one liveness cycle for a host and show the resulting state."""
    console = Console()
    settings = load_settings_or_exit()
    result = parse_hosts_or_exit(settings)

    host = next((item for item in result.hosts if item.name == name), None)
    if host is None:
        console.print(f"[yellow]![/yellow] Host '{name}' not configured")
        raise typer.Exit(1)

    console.print(f"Probing {host.name} ({host.address_source.value})...")
    logger.info(
        "Probe settings: timeout=%.2fs, retries=%d", host.timeout, host.retries
    )

    try:
        target, outcome = asyncio.run(_run_cycle(host))
    except ResolutionError as exc:
        console.print(f"[red]✗[/red] {host.name}: {exc}")
        state = map_state(False, host.closed_on_success, host.device_type)
        console.print(f"Published value: {state.kind.value} = {state.value!r}")
        raise typer.Exit(1) from None

    state = map_state(outcome.alive, host.closed_on_success, host.device_type)
    if outcome.alive:
        console.print(
            f"[green]✓[/green] {host.name} reachable at {target.address} "
            f"(attempt {outcome.attempts}/{host.retries})"
        )
    else:
        console.print(
            f"[red]✗[/red] {host.name} unreachable at {target.address} "
            f"after {outcome.attempts} attempt(s): {outcome.last_error}"
        )
    console.print(f"Published value: {state.kind.value} = {state.value!r}")

    if not outcome.alive:
        raise typer.Exit(1)


def register(app: typer.Typer) -> None:
    app.command()(check)
