from __future__ import annotations

from dataclasses import dataclass

from pinghosts.errors import ProbeError
from pinghosts.models.accessory import CapabilityKind


@dataclass(frozen=True)
class ResolvedTarget:
    address: str
    ipv6: bool = False


@dataclass(frozen=True)
class ProbeOutcome:
    alive: bool
    attempts: int
    last_error: ProbeError | None = None


@dataclass(frozen=True)
class PublishedState:
    kind: CapabilityKind
    value: int | bool
