"""pinghosts - expose the reachability of network hosts as device states."""

from __future__ import annotations

from importlib.metadata import version

from .bridge import AccessoryBridge
from .config import Settings, get_settings, parse_hosts
from .core import AccessoryRegistry, HostMonitor, MonitorSupervisor, map_state
from .models import AccessoryRecord, DeviceType, HostConfig, ProbeOutcome
from .storage import Database

__all__ = [
    "AccessoryBridge",
    "AccessoryRecord",
    "AccessoryRegistry",
    "Database",
    "DeviceType",
    "HostConfig",
    "HostMonitor",
    "MonitorSupervisor",
    "ProbeOutcome",
    "Settings",
    "__version__",
    "get_settings",
    "map_state",
    "parse_hosts",
]

__version__ = version("pinghosts")
