from __future__ import annotations

import asyncio

import pytest

from pinghosts.core import AddressResolver, normalize_mac
from pinghosts.errors import ResolutionError
from pinghosts.models import HostConfig, ResolvedTarget


class FakeLookup:
    def __init__(self, *answers: str | None | BaseException) -> None:
        self.answers = list(answers)
        self.calls: list[str] = []

    async def __call__(self, mac_address: str) -> str | None:
        self.calls.append(mac_address)
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


def _resolve(host: HostConfig, lookup: FakeLookup | None = None) -> ResolvedTarget:
    resolver = AddressResolver(host, lookup=lookup or FakeLookup())
    return asyncio.run(resolver.resolve())


@pytest.mark.parametrize(
    "extra",
    [
        {},
        {"ipv4_address": "192.168.1.10"},
        {"host": "printer.lan"},
        {"mac_address": "aa:bb:cc:dd:ee:ff"},
        {"ipv4_address": "192.168.1.10", "mac_address": "aa:bb:cc:dd:ee:ff"},
    ],
)
def test_ipv6_always_wins(extra):
    host = HostConfig(name="nas", ipv6_address="fd00::10", **extra)
    lookup = FakeLookup()

    assert _resolve(host, lookup) == ResolvedTarget("fd00::10", ipv6=True)
    assert lookup.calls == []


def test_ipv4_wins_over_mac():
    host = HostConfig(
        name="tv", ipv4_address="192.168.1.20", mac_address="aa:bb:cc:dd:ee:ff"
    )
    lookup = FakeLookup()

    assert _resolve(host, lookup) == ResolvedTarget("192.168.1.20")
    assert lookup.calls == []


def test_ipv4_address_preferred_over_legacy_host():
    host = HostConfig(name="tv", ipv4_address="192.168.1.20", host="tv.lan")

    assert _resolve(host).address == "192.168.1.20"


def test_mac_resolved_every_cycle():
    host = HostConfig(name="phone", mac_address="AA-BB-CC-DD-EE-FF")
    lookup = FakeLookup("192.168.1.30", "192.168.1.31")
    resolver = AddressResolver(host, lookup=lookup)

    first = asyncio.run(resolver.resolve())
    second = asyncio.run(resolver.resolve())

    assert first == ResolvedTarget("192.168.1.30")
    assert second == ResolvedTarget("192.168.1.31")
    assert len(lookup.calls) == 2


def test_mac_target_is_probed_as_ipv4():
    host = HostConfig(name="phone", mac_address="aa:bb:cc:dd:ee:ff")

    target = _resolve(host, FakeLookup("fe80::a8bb:ccff:fedd:eeff"))

    assert target.ipv6 is False


def test_mac_without_arp_entry_fails():
    host = HostConfig(name="phone", mac_address="aa:bb:cc:dd:ee:ff")

    with pytest.raises(ResolutionError, match="no ARP entry"):
        _resolve(host, FakeLookup(None))


def test_mac_lookup_error_becomes_resolution_error():
    host = HostConfig(name="phone", mac_address="aa:bb:cc:dd:ee:ff")

    with pytest.raises(ResolutionError, match="ARP lookup"):
        _resolve(host, FakeLookup(OSError("permission denied")))


def test_no_address_fails_every_cycle():
    host = HostConfig.model_construct(name="ghost")
    resolver = AddressResolver(host, lookup=FakeLookup())

    for _ in range(2):
        with pytest.raises(ResolutionError, match="no address"):
            asyncio.run(resolver.resolve())


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("AA:BB:CC:DD:EE:FF", "aa:bb:cc:dd:ee:ff"),
        ("aa-bb-cc-dd-ee-ff", "aa:bb:cc:dd:ee:ff"),
        ("aabb.ccdd.eeff", "aa:bb:cc:dd:ee:ff"),
    ],
)
def test_normalize_mac(value, expected):
    assert normalize_mac(value) == expected
