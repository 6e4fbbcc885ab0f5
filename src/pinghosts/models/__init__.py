"""Data models for pinghosts."""

from pinghosts.models.accessory import (
    CAPABILITY_BY_TYPE,
    AccessoryCache,
    AccessoryRecord,
    CapabilityKind,
    ContactState,
    stable_identifier,
)
from pinghosts.models.host import AddressSource, DeviceType, HostConfig
from pinghosts.models.outcome import ProbeOutcome, PublishedState, ResolvedTarget

__all__ = [
    "CAPABILITY_BY_TYPE",
    "AccessoryCache",
    "AccessoryRecord",
    "AddressSource",
    "CapabilityKind",
    "ContactState",
    "DeviceType",
    "HostConfig",
    "ProbeOutcome",
    "PublishedState",
    "ResolvedTarget",
    "stable_identifier",
]
