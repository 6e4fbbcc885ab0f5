from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pinghosts.models import AccessoryRecord, HostConfig, stable_identifier

from .collaborators import AccessoryStore, DevicePublisher

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


class AccessoryRegistry:
    """Keeps persisted accessory identities in step with the configured hosts.

    Identity is derived from the host name, so a renamed host is retired and
    registered again under a new identifier.
    """

    def __init__(self, publisher: DevicePublisher, store: AccessoryStore) -> None:
        self._publisher = publisher
        self._store = store
        self._records: dict[str, AccessoryRecord] = {}

    @property
    def records(self) -> dict[str, AccessoryRecord]:
        return dict(self._records)

    def load(self) -> dict[str, AccessoryRecord]:
        self._records = self._store.load_accessories()
        for record in self._records.values():
            logger.info("Loading accessory from cache: %s", record.name)
            self._publisher.restore(record.identifier, record.name)
        return self.records

    def _expose(self, record: AccessoryRecord) -> None:
        wanted = record.capability
        stale = record.capabilities - {wanted}
        for kind in sorted(stale, key=lambda item: item.value):
            logger.info("[%s] removing stale capability %s", record.name, kind.value)
        self._publisher.set_capabilities(record.identifier, frozenset({wanted}))
        record.capabilities = {wanted}

    def reconcile(self, hosts: list[HostConfig]) -> ReconcileResult:
        """Register, update or retire accessories so they match ``hosts``."""
        result = ReconcileResult()
        current: dict[str, AccessoryRecord] = {}

        for host in hosts:
            identifier = stable_identifier(host.name)
            existing = self._records.get(identifier)
            if existing is not None:
                logger.info("Restoring existing accessory from cache: %s", host.name)
                record = existing.model_copy(update={"host": host, "name": host.name})
                result.updated.append(identifier)
            else:
                logger.info("Adding new accessory: %s", host.name)
                record = AccessoryRecord.for_host(host)
                self._publisher.register(identifier, host.name)
                result.created.append(identifier)
            self._expose(record)
            current[identifier] = record

        for identifier, record in self._records.items():
            if identifier not in current:
                logger.info("Removing existing accessory from cache: %s", record.name)
                self._publisher.unregister(identifier)
                result.removed.append(identifier)

        self._records = current
        self._store.save_accessories(self.records)
        return result
