"""In-process device bridge holding the state published for every accessory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pinghosts.core.collaborators import WriteHandler
from pinghosts.models import CapabilityKind

logger = logging.getLogger(__name__)


@dataclass
class BridgedAccessory:
    identifier: str
    name: str
    capabilities: set[CapabilityKind] = field(default_factory=set)
    values: dict[CapabilityKind, int | bool] = field(default_factory=dict)
    handlers: dict[CapabilityKind, WriteHandler] = field(default_factory=dict)


class AccessoryBridge:
    def __init__(self) -> None:
        self._accessories: dict[str, BridgedAccessory] = {}

    @property
    def accessories(self) -> dict[str, BridgedAccessory]:
        return dict(self._accessories)

    def _get(self, identifier: str) -> BridgedAccessory:
        try:
            return self._accessories[identifier]
        except KeyError:
            raise KeyError(f"unknown accessory {identifier}") from None

    def register(self, identifier: str, name: str) -> None:
        if identifier in self._accessories:
            return
        self._accessories[identifier] = BridgedAccessory(identifier, name)
        logger.debug("Registered accessory %s (%s)", name, identifier)

    def restore(self, identifier: str, name: str) -> None:
        self._accessories.setdefault(identifier, BridgedAccessory(identifier, name))

    def unregister(self, identifier: str) -> None:
        accessory = self._accessories.pop(identifier, None)
        if accessory is not None:
            logger.debug("Unregistered accessory %s (%s)", accessory.name, identifier)

    def set_capabilities(
        self, identifier: str, kinds: frozenset[CapabilityKind]
    ) -> None:
        accessory = self._get(identifier)
        for kind in accessory.capabilities - kinds:
            accessory.values.pop(kind, None)
            accessory.handlers.pop(kind, None)
        accessory.capabilities = set(kinds)

    def publish(self, identifier: str, kind: CapabilityKind, value: int | bool) -> None:
        accessory = self._get(identifier)
        if kind not in accessory.capabilities:
            raise ValueError(f"{accessory.name} does not expose {kind.value}")
        previous = accessory.values.get(kind)
        accessory.values[kind] = value
        if previous is None or previous != value:
            logger.info(
                "[%s] %s: %s -> %s", accessory.name, kind.value, previous, value
            )

    def set_write_handler(
        self, identifier: str, kind: CapabilityKind, handler: WriteHandler
    ) -> None:
        self._get(identifier).handlers[kind] = handler

    def value(self, identifier: str, kind: CapabilityKind) -> int | bool | None:
        return self._get(identifier).values.get(kind)

    def write(
        self, identifier: str, kind: CapabilityKind, value: int | bool
    ) -> int | bool:
        """Apply an external write request and return the value now observable.

        The accessory's write handler decides the stored value, so a handler that
        answers with its own authoritative value makes the capability read-only.
        """
        accessory = self._get(identifier)
        handler = accessory.handlers.get(kind)
        if handler is None:
            raise PermissionError(f"{kind.value} on {accessory.name} is read-only")
        accepted = handler(value)
        accessory.values[kind] = accepted
        return accepted
