from __future__ import annotations

import asyncio

import pytest

from pinghosts.bridge import AccessoryBridge
from pinghosts.core import HostMonitor, MonitorState, MonitorSupervisor
from pinghosts.models import (
    AccessoryRecord,
    CapabilityKind,
    ContactState,
    DeviceType,
    HostConfig,
)


def _bridge_for(*records: AccessoryRecord) -> AccessoryBridge:
    bridge = AccessoryBridge()
    for record in records:
        bridge.register(record.identifier, record.name)
        bridge.set_capabilities(record.identifier, frozenset({record.capability}))
    return bridge


async def _no_lookup(mac_address: str) -> str | None:
    return None


def _monitor(host: HostConfig, probe, bridge: AccessoryBridge | None = None):
    record = AccessoryRecord.for_host(host)
    bridge = bridge or _bridge_for(record)
    monitor = HostMonitor(
        record.identifier, host, bridge, probe=probe, lookup=_no_lookup
    )
    return monitor, bridge


@pytest.mark.parametrize(
    ("startup_as_failed", "closed_on_success", "expected"),
    [
        (True, True, ContactState.CONTACT_NOT_DETECTED),
        (False, True, ContactState.CONTACT_DETECTED),
        (True, False, ContactState.CONTACT_DETECTED),
        (False, False, ContactState.CONTACT_NOT_DETECTED),
    ],
)
def test_startup_state_published_before_first_cycle(
    scripted_probe, startup_as_failed, closed_on_success, expected
):
    host = HostConfig(
        name="nas",
        ipv4_address="192.168.1.10",
        startup_as_failed=startup_as_failed,
        closed_on_success=closed_on_success,
    )
    probe = scripted_probe(True)
    monitor, bridge = _monitor(host, probe)

    async def _scenario():
        monitor.start()
        value = bridge.value(monitor.identifier, CapabilityKind.CONTACT_SENSOR_STATE)
        await monitor.stop()
        return value

    assert asyncio.run(_scenario()) == expected
    assert probe.calls == []
    assert monitor.state is MonitorState.PUBLISHED


def test_cycle_overwrites_startup_state(scripted_probe):
    host = HostConfig(name="nas", ipv4_address="192.168.1.10", type="switch")
    monitor, bridge = _monitor(host, scripted_probe(True, False))
    monitor.publish_startup_state()
    assert bridge.value(monitor.identifier, CapabilityKind.ON) is False

    asyncio.run(monitor.run_cycle())
    assert bridge.value(monitor.identifier, CapabilityKind.ON) is True

    asyncio.run(monitor.run_cycle())
    assert bridge.value(monitor.identifier, CapabilityKind.ON) is False


def test_resolution_failure_maps_to_failure_state(scripted_probe):
    host = HostConfig(
        name="phone",
        mac_address="aa:bb:cc:dd:ee:ff",
        type="motion",
        startup_as_failed=False,
    )
    probe = scripted_probe(True)
    monitor, bridge = _monitor(host, probe)
    monitor.publish_startup_state()

    state = asyncio.run(monitor.run_cycle())

    assert state.value is False
    assert bridge.value(monitor.identifier, CapabilityKind.MOTION_DETECTED) is False
    assert probe.calls == []


def test_unexpected_error_degrades_to_failure_state(caplog):
    async def _broken_probe(address: str, timeout: float, ipv6: bool) -> bool:
        raise RuntimeError("library bug")

    host = HostConfig(name="nas", ipv4_address="192.168.1.10", startup_as_failed=False)
    monitor, bridge = _monitor(host, _broken_probe)
    monitor.publish_startup_state()

    state = asyncio.run(monitor.run_cycle())

    assert state.value == ContactState.CONTACT_NOT_DETECTED
    assert "unexpected error" in caplog.text


def test_retry_budget_used_per_cycle(scripted_probe):
    host = HostConfig(name="nas", ipv4_address="192.168.1.10", retries=3)
    probe = scripted_probe(False, True)
    monitor, _ = _monitor(host, probe)

    state = asyncio.run(monitor.run_cycle())

    assert state.value == ContactState.CONTACT_DETECTED
    assert len(probe.calls) == 2


def test_switch_write_is_reverted(scripted_probe):
    host = HostConfig(name="nas", ipv4_address="192.168.1.10", type="switch")
    monitor, bridge = _monitor(host, scripted_probe(True))
    monitor.publish_startup_state()
    asyncio.run(monitor.run_cycle())

    observed = bridge.write(monitor.identifier, CapabilityKind.ON, False)

    assert observed is True
    assert bridge.value(monitor.identifier, CapabilityKind.ON) is True


def test_sensor_writes_rejected(scripted_probe):
    host = HostConfig(name="nas", ipv4_address="192.168.1.10", type="motion")
    monitor, bridge = _monitor(host, scripted_probe(True))
    monitor.publish_startup_state()

    with pytest.raises(PermissionError):
        bridge.write(monitor.identifier, CapabilityKind.MOTION_DETECTED, True)


def test_overdue_ticks_are_skipped():
    active = 0
    peak = 0
    calls = 0

    async def _slow_probe(address: str, timeout: float, ipv6: bool) -> bool:
        nonlocal active, peak, calls
        calls += 1
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.12)
        active -= 1
        return True

    host = HostConfig(name="nas", ipv4_address="192.168.1.10", interval=0.05)
    monitor, _ = _monitor(host, _slow_probe)

    async def _scenario():
        monitor.start()
        await asyncio.sleep(0.4)
        await monitor.stop()

    asyncio.run(_scenario())

    assert peak == 1
    assert calls >= 2
    assert monitor.skipped_ticks >= 1
    assert not monitor.running


def test_stuck_host_does_not_block_others(scripted_probe):
    async def _stuck_probe(address: str, timeout: float, ipv6: bool) -> bool:
        await asyncio.sleep(10)
        return True

    stuck_host = HostConfig(
        name="stuck", ipv4_address="192.168.1.10", interval=0.01, timeout=30
    )
    fast_host = HostConfig(
        name="fast", ipv4_address="192.168.1.11", interval=0.01, type="switch"
    )
    stuck_record = AccessoryRecord.for_host(stuck_host)
    fast_record = AccessoryRecord.for_host(fast_host)
    bridge = _bridge_for(stuck_record, fast_record)

    fast_probe = scripted_probe(True)

    async def _probe(address: str, timeout: float, ipv6: bool) -> bool:
        if address == "192.168.1.10":
            return await _stuck_probe(address, timeout, ipv6)
        return await fast_probe(address, timeout, ipv6)

    supervisor = MonitorSupervisor(bridge, probe=_probe, lookup=_no_lookup)

    async def _scenario():
        supervisor.start([stuck_record, fast_record])
        await asyncio.sleep(0.1)
        await supervisor.stop()

    asyncio.run(_scenario())

    assert len(fast_probe.calls) >= 2
    assert bridge.value(fast_record.identifier, CapabilityKind.ON) is True
    assert bridge.value(
        stuck_record.identifier, CapabilityKind.CONTACT_SENSOR_STATE
    ) == ContactState.CONTACT_NOT_DETECTED
    assert all(not monitor.running for monitor in supervisor.monitors.values())


def test_supervisor_publishes_startup_values_for_all_hosts(scripted_probe):
    hosts = [
        HostConfig(name="a", ipv4_address="10.0.0.1", type=DeviceType.MOTION),
        HostConfig(name="b", ipv4_address="10.0.0.2", startup_as_failed=False),
    ]
    records = [AccessoryRecord.for_host(host) for host in hosts]
    bridge = _bridge_for(*records)
    supervisor = MonitorSupervisor(
        bridge, probe=scripted_probe(True), lookup=_no_lookup
    )

    async def _scenario():
        supervisor.start(records)
        values = [
            bridge.value(records[0].identifier, CapabilityKind.MOTION_DETECTED),
            bridge.value(records[1].identifier, CapabilityKind.CONTACT_SENSOR_STATE),
        ]
        await supervisor.stop()
        return values

    assert asyncio.run(_scenario()) == [False, ContactState.CONTACT_DETECTED]


class FlakyBridge(AccessoryBridge):
    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    def publish(self, identifier, kind, value) -> None:
        if self.failing:
            raise RuntimeError("bridge offline")
        super().publish(identifier, kind, value)


def test_publish_failure_keeps_monitor_running(scripted_probe, caplog):
    host = HostConfig(name="nas", ipv4_address="192.168.1.10", interval=0.02)
    record = AccessoryRecord.for_host(host)
    bridge = FlakyBridge()
    bridge.register(record.identifier, record.name)
    bridge.set_capabilities(record.identifier, frozenset({record.capability}))
    probe = scripted_probe(True)
    monitor, _ = _monitor(host, probe, bridge)

    async def _scenario():
        monitor.start()
        bridge.failing = True
        await asyncio.sleep(0.15)
        still_running = monitor.running
        await monitor.stop()
        return still_running

    assert asyncio.run(_scenario()) is True
    assert len(probe.calls) >= 2
    assert "failed to publish" in caplog.text
