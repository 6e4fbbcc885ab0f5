"""Accessory models shared by the registry, the bridge and the cache."""

from __future__ import annotations

import uuid
from enum import Enum, IntEnum

from pydantic import BaseModel, Field

from pinghosts.models.host import DeviceType, HostConfig

# Fixed namespace so identifiers stay stable across restarts and machines.
ACCESSORY_NAMESPACE = uuid.UUID("6f1c2a3e-9d4b-5e7a-8c21-3b5f0d9e4a17")


class CapabilityKind(str, Enum):
    CONTACT_SENSOR_STATE = "contact_sensor_state"
    MOTION_DETECTED = "motion_detected"
    ON = "on"


class ContactState(IntEnum):
    CONTACT_DETECTED = 0
    CONTACT_NOT_DETECTED = 1


CAPABILITY_BY_TYPE: dict[DeviceType, CapabilityKind] = {
    DeviceType.CONTACT: CapabilityKind.CONTACT_SENSOR_STATE,
    DeviceType.MOTION: CapabilityKind.MOTION_DETECTED,
    DeviceType.SWITCH: CapabilityKind.ON,
}


def stable_identifier(name: str) -> str:
    return str(uuid.uuid5(ACCESSORY_NAMESPACE, name))


class AccessoryRecord(BaseModel):
    model_config = {"extra": "forbid"}

    identifier: str
    name: str
    host: HostConfig
    capabilities: set[CapabilityKind] = Field(default_factory=set)

    @classmethod
    def for_host(cls, host: HostConfig) -> AccessoryRecord:
        return cls(identifier=stable_identifier(host.name), name=host.name, host=host)

    @property
    def capability(self) -> CapabilityKind:
        """Capability matching the currently configured device type."""
        return CAPABILITY_BY_TYPE[self.host.device_type]


class AccessoryCache(BaseModel):
    """Persisted accessory records keyed by identifier."""

    model_config = {"extra": "forbid"}

    accessories: dict[str, AccessoryRecord] = Field(default_factory=dict)
