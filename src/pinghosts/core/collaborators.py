"""Default probe and address-lookup collaborators, and the publisher interface."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
import string
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

import ping3

from pinghosts.errors import ProbeError
from pinghosts.models import AccessoryRecord, CapabilityKind

logger = logging.getLogger(__name__)

ARP_TABLE_PATH = Path("/proc/net/arp")
INCOMPLETE_MAC = "00:00:00:00:00:00"


class Prober(Protocol):
    async def __call__(self, address: str, timeout: float, ipv6: bool) -> bool: ...


class MacLookup(Protocol):
    async def __call__(self, mac_address: str) -> str | None: ...


WriteHandler = Callable[[int | bool], int | bool]


class DevicePublisher(Protocol):
    """Where accessory identities and their values are made observable."""

    def register(self, identifier: str, name: str) -> None: ...

    def restore(self, identifier: str, name: str) -> None: ...

    def unregister(self, identifier: str) -> None: ...

    def set_capabilities(
        self, identifier: str, kinds: frozenset[CapabilityKind]
    ) -> None: ...

    def publish(
        self, identifier: str, kind: CapabilityKind, value: int | bool
    ) -> None: ...

    def set_write_handler(
        self, identifier: str, kind: CapabilityKind, handler: WriteHandler
    ) -> None: ...


class AccessoryStore(Protocol):
    def load_accessories(self) -> dict[str, AccessoryRecord]: ...

    def save_accessories(self, records: dict[str, AccessoryRecord]) -> None: ...


def normalize_mac(value: str) -> str:
    cleaned = value.strip().replace(":", "").replace("-", "").replace(".", "")
    if len(cleaned) == 12 and all(ch in string.hexdigits for ch in cleaned):
        pairs = [cleaned[i : i + 2] for i in range(0, 12, 2)]
        return ":".join(pair.lower() for pair in pairs)
    return value.strip().lower()


def _ping_ipv4(address: str, timeout: float) -> bool:
    try:
        delay = ping3.ping(address, timeout=timeout)
    except OSError as exc:
        raise ProbeError(f"ping to {address} failed: {exc}") from exc
    logger.debug("ping3 %s -> %s", address, delay)
    # ping3 returns None on timeout and False on errors such as unknown hosts.
    return delay is not None and delay is not False


async def _ping_ipv6(address: str, timeout: float) -> bool:
    try:
        proc = await asyncio.create_subprocess_exec(
            "ping",
            "-6",
            "-c",
            "1",
            "-W",
            str(max(math.ceil(timeout), 1)),
            address,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise ProbeError(f"ping -6 to {address} failed: {exc}") from exc

    try:
        _, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        logger.debug("ping -6 %s -> no reply within %ss", address, timeout)
        return False
    finally:
        # A timed out or cancelled attempt must not leave ping running.
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()

    logger.debug("ping -6 %s -> exit %s", address, proc.returncode)
    if proc.returncode not in (0, 1):
        message = stderr.decode(errors="replace").strip()
        raise ProbeError(f"ping -6 to {address} exited {proc.returncode}: {message}")
    return proc.returncode == 0


async def icmp_probe(address: str, timeout: float, ipv6: bool) -> bool:
    """Send one ICMP echo and report whether a reply arrived within ``timeout``."""
    if ipv6:
        return await _ping_ipv6(address, timeout)
    return await asyncio.to_thread(_ping_ipv4, address, timeout)


def _read_arp_table(mac: str) -> str | None:
    with ARP_TABLE_PATH.open("r", encoding="utf-8") as handle:
        next(handle, None)
        for line in handle:
            parts = line.split()
            if len(parts) < 4:
                continue
            ip, entry_mac = parts[0], parts[3].lower()
            if entry_mac == INCOMPLETE_MAC:
                continue
            if entry_mac == mac:
                return ip
    return None


async def _read_ip_neigh(mac: str) -> str | None:
    proc = await asyncio.create_subprocess_exec(
        "ip",
        "-4",
        "neigh",
        "show",
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.DEVNULL,
    )
    stdout, _ = await proc.communicate()
    if proc.returncode != 0:
        raise OSError(f"ip -4 neigh show exited {proc.returncode}")
    for line in stdout.decode(errors="replace").splitlines():
        parts = line.split()
        if not parts or ":" in parts[0] or "lladdr" not in parts:
            continue
        index = parts.index("lladdr")
        if index + 1 < len(parts) and parts[index + 1].lower() == mac:
            return parts[0]
    return None


async def arp_lookup(mac_address: str) -> str | None:
    """Find the IP address currently bound to ``mac_address`` in the neighbour table."""
    mac = normalize_mac(mac_address)
    if ARP_TABLE_PATH.exists():
        address = await asyncio.to_thread(_read_arp_table, mac)
        if address:
            return address
    return await _read_ip_neigh(mac)
