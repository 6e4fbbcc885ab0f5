from __future__ import annotations

from pinghosts.models import (
    CAPABILITY_BY_TYPE,
    CapabilityKind,
    ContactState,
    DeviceType,
    PublishedState,
)

_SUCCESS_VALUES: dict[CapabilityKind, tuple[int | bool, int | bool]] = {
    CapabilityKind.CONTACT_SENSOR_STATE: (
        ContactState.CONTACT_DETECTED,
        ContactState.CONTACT_NOT_DETECTED,
    ),
    CapabilityKind.MOTION_DETECTED: (True, False),
    CapabilityKind.ON: (True, False),
}


def map_state(
    alive: bool, closed_on_success: bool, device_type: DeviceType
) -> PublishedState:
    """Value to publish for a probe result under the configured polarity.

    With ``closed_on_success`` a reachable host shows the "closed" value
    (contact detected, motion, on); otherwise the two values swap.
    """
    kind = CAPABILITY_BY_TYPE[device_type]
    closed, opened = _SUCCESS_VALUES[kind]
    return PublishedState(kind, closed if alive == closed_on_success else opened)


def startup_state(
    startup_as_failed: bool, closed_on_success: bool, device_type: DeviceType
) -> PublishedState:
    return map_state(not startup_as_failed, closed_on_success, device_type)
