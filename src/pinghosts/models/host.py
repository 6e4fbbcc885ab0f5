"""Host configuration models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class DeviceType(str, Enum):
    CONTACT = "contact"
    MOTION = "motion"
    SWITCH = "switch"


_DEVICE_TYPE_ALIASES = {
    "contact": DeviceType.CONTACT,
    "contactsensor": DeviceType.CONTACT,
    "motion": DeviceType.MOTION,
    "motionsensor": DeviceType.MOTION,
    "switch": DeviceType.SWITCH,
    "lightbulb": DeviceType.SWITCH,
}


class AddressSource(str, Enum):
    IPV6 = "ipv6"
    IPV4 = "ipv4"
    MAC = "mac"
    NONE = "none"


class HostConfig(BaseModel):
    """One monitored host as written in the config file."""

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    name: str = Field(min_length=1)
    ipv4_address: str | None = None
    ipv6_address: str | None = None
    mac_address: str | None = None
    host: str | None = None  # legacy alias for ipv4_address
    interval: float = Field(default=60, gt=0)
    timeout: float = Field(default=25, gt=0)
    retries: int = 1
    startup_as_failed: bool = True
    closed_on_success: bool = True
    device_type: DeviceType = Field(default=DeviceType.CONTACT, alias="type")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("ipv4_address", "ipv6_address", "mac_address", "host")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("retries", mode="before")
    @classmethod
    def _at_least_one_attempt(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool) and value < 1:
            return 1
        return value

    @field_validator("device_type", mode="before")
    @classmethod
    def _parse_device_type(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return _DEVICE_TYPE_ALIASES[value.strip().lower()]
            except KeyError:
                allowed = ", ".join(item.value for item in DeviceType)
                raise ValueError(
                    f"unknown type '{value}', expected one of: {allowed}"
                ) from None
        return value

    @model_validator(mode="after")
    def _require_address(self) -> HostConfig:
        if not (
            self.ipv6_address or self.ipv4_address or self.host or self.mac_address
        ):
            raise ValueError("specify one of ipv6_address, ipv4_address or mac_address")
        return self

    @property
    def ipv4_or_host(self) -> str | None:
        return self.ipv4_address or self.host

    @property
    def address_source(self) -> AddressSource:
        """Which configured address is used, by priority IPv6 > IPv4 > MAC."""
        if self.ipv6_address:
            return AddressSource.IPV6
        if self.ipv4_or_host:
            return AddressSource.IPV4
        if self.mac_address:
            return AddressSource.MAC
        return AddressSource.NONE

    @property
    def ignored_addresses(self) -> list[str]:
        """Configured address fields that lose to a higher priority one."""
        source = self.address_source
        ignored: list[str] = []
        if source is AddressSource.IPV6:
            if self.ipv4_or_host:
                ignored.append("ipv4_address")
            if self.mac_address:
                ignored.append("mac_address")
        elif source is AddressSource.IPV4 and self.mac_address:
            ignored.append("mac_address")
        return ignored

    @property
    def display_address(self) -> str:
        return self.ipv6_address or self.ipv4_or_host or self.mac_address or ""

    @classmethod
    def unknown_keys(cls, entry: dict[str, Any]) -> list[str]:
        """Keys of a raw config entry that no field reads."""
        known = set(cls.model_fields)
        known.update(info.alias for info in cls.model_fields.values() if info.alias)
        return sorted(key for key in entry if key not in known)
