from __future__ import annotations

from .collaborators import (
    AccessoryStore,
    DevicePublisher,
    MacLookup,
    Prober,
    arp_lookup,
    icmp_probe,
    normalize_mac,
)
from .mapper import map_state, startup_state
from .monitor import HostMonitor, MonitorState, MonitorSupervisor
from .prober import LivenessProber
from .registry import AccessoryRegistry, ReconcileResult
from .resolver import AddressResolver

__all__ = [
    "AccessoryRegistry",
    "AccessoryStore",
    "AddressResolver",
    "DevicePublisher",
    "HostMonitor",
    "LivenessProber",
    "MacLookup",
    "MonitorState",
    "MonitorSupervisor",
    "Prober",
    "ReconcileResult",
    "arp_lookup",
    "icmp_probe",
    "map_state",
    "normalize_mac",
    "startup_state",
]
