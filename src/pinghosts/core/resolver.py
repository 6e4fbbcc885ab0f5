from __future__ import annotations

import logging

from pinghosts.errors import ResolutionError
from pinghosts.models import AddressSource, HostConfig, ResolvedTarget

from .collaborators import MacLookup, arp_lookup

logger = logging.getLogger(__name__)


class AddressResolver:
    """Pick the probe target for a host, once per liveness cycle.

    IPv6 wins over IPv4 (or the legacy ``host`` field), which wins over a MAC
    address. MAC addresses are looked up in the neighbour table on every call;
    the result is never reused by a later cycle.
    """

    def __init__(self, host: HostConfig, lookup: MacLookup = arp_lookup) -> None:
        self._host = host
        self._lookup = lookup

    @property
    def source(self) -> AddressSource:
        return self._host.address_source

    async def resolve(self) -> ResolvedTarget:
        host = self._host

        if address := host.ipv6_address:
            return ResolvedTarget(address, ipv6=True)

        if address := host.ipv4_or_host:
            return ResolvedTarget(address)

        if mac := host.mac_address:
            try:
                resolved = await self._lookup(mac)
            except OSError as exc:
                raise ResolutionError(f"ARP lookup for {mac} failed: {exc}") from exc
            if not resolved:
                raise ResolutionError(f"no ARP entry for {mac}")
            logger.debug("[%s] ARP lookup result: %s => %s", host.name, mac, resolved)
            # Neighbour lookups only yield IPv4 targets.
            return ResolvedTarget(resolved)

        raise ResolutionError("no address resolved")
