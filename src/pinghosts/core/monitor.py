from __future__ import annotations

import asyncio
import logging
from enum import Enum

from pinghosts.errors import ProbeError, ResolutionError
from pinghosts.models import (
    AccessoryRecord,
    CapabilityKind,
    HostConfig,
    ProbeOutcome,
    PublishedState,
)

from .collaborators import DevicePublisher, MacLookup, Prober, arp_lookup, icmp_probe
from .mapper import map_state, startup_state
from .prober import LivenessProber
from .resolver import AddressResolver

logger = logging.getLogger(__name__)


class MonitorState(str, Enum):
    IDLE = "idle"
    PROBING = "probing"
    PUBLISHED = "published"


class HostMonitor:
    """Owns one host's schedule and the value published for it."""

    def __init__(
        self,
        identifier: str,
        host: HostConfig,
        publisher: DevicePublisher,
        probe: Prober = icmp_probe,
        lookup: MacLookup = arp_lookup,
    ) -> None:
        self.identifier = identifier
        self.host = host
        self._publisher = publisher
        self._resolver = AddressResolver(host, lookup=lookup)
        self._prober = LivenessProber(host.name, host.timeout, host.retries, probe)
        self._state = MonitorState.IDLE
        self._published: PublishedState | None = None
        self._task: asyncio.Task[None] | None = None
        self.skipped_ticks = 0

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def published(self) -> PublishedState | None:
        return self._published

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _publish(self, state: PublishedState) -> None:
        self._published = state
        self._publisher.publish(self.identifier, state.kind, state.value)
        self._state = MonitorState.PUBLISHED

    def _on_write(self, value: int | bool) -> int | bool:
        current = self._published.value if self._published else value
        if value != current:
            logger.debug(
                "[%s] ignoring request to set value to %s, current: %s",
                self.host.name,
                value,
                current,
            )
        return current

    def publish_startup_state(self) -> PublishedState:
        host = self.host
        logger.info("[%s] closed_on_success: %s", host.name, host.closed_on_success)
        logger.info("[%s] startup_as_failed: %s", host.name, host.startup_as_failed)
        state = startup_state(
            host.startup_as_failed, host.closed_on_success, host.device_type
        )
        if state.kind is CapabilityKind.ON:
            self._publisher.set_write_handler(
                self.identifier, state.kind, self._on_write
            )
        self._publish(state)
        return state

    async def probe_once(self) -> ProbeOutcome:
        """Resolve the target and run the attempt budget against it."""
        target = await self._resolver.resolve()
        return await self._prober.run(target)

    async def run_cycle(self) -> PublishedState:
        """One liveness cycle: resolve, probe, map and publish."""
        host = self.host
        self._state = MonitorState.PROBING
        try:
            outcome = await self.probe_once()
        except ResolutionError as exc:
            logger.debug("[%s] resolution failed: %s", host.name, exc)
            alive = False
        except ProbeError as exc:
            logger.debug("[%s] probe failed: %s", host.name, exc)
            alive = False
        except Exception:
            logger.exception("[%s] unexpected error during liveness cycle", host.name)
            alive = False
        else:
            alive = outcome.alive
            if not alive:
                logger.debug(
                    "[%s] response error: %s for %s after %d attempt(s)",
                    host.name,
                    outcome.last_error,
                    host.display_address,
                    outcome.attempts,
                )

        state = map_state(alive, host.closed_on_success, host.device_type)
        try:
            self._publish(state)
        except Exception:
            logger.exception("[%s] failed to publish %s", host.name, state.kind.value)
        return state

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.host.interval
        next_tick = loop.time() + interval
        while True:
            await asyncio.sleep(max(next_tick - loop.time(), 0))
            await self.run_cycle()

            next_tick += interval
            now = loop.time()
            if next_tick <= now:
                # Cycles never overlap; ticks that elapsed while busy are dropped.
                missed = int((now - next_tick) // interval) + 1
                self.skipped_ticks += missed
                logger.debug(
                    "[%s] cycle overran interval, skipping %d tick(s)",
                    self.host.name,
                    missed,
                )
                next_tick += missed * interval

    def start(self) -> None:
        if self.running:
            return
        if self._published is None:
            self.publish_startup_state()
        self._task = asyncio.create_task(self._run(), name=f"monitor:{self.host.name}")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None


class MonitorSupervisor:
    """Owns every HostMonitor for the lifetime of the process."""

    def __init__(
        self,
        publisher: DevicePublisher,
        probe: Prober = icmp_probe,
        lookup: MacLookup = arp_lookup,
    ) -> None:
        self._publisher = publisher
        self._probe = probe
        self._lookup = lookup
        self._monitors: dict[str, HostMonitor] = {}

    @property
    def monitors(self) -> dict[str, HostMonitor]:
        return dict(self._monitors)

    def add(self, record: AccessoryRecord) -> HostMonitor:
        monitor = HostMonitor(
            record.identifier,
            record.host,
            self._publisher,
            probe=self._probe,
            lookup=self._lookup,
        )
        self._monitors[record.identifier] = monitor
        return monitor

    def start(self, records: list[AccessoryRecord]) -> None:
        for record in records:
            self.add(record)
        # Every host shows its startup value before any cycle is scheduled.
        for monitor in self._monitors.values():
            monitor.publish_startup_state()
        for monitor in self._monitors.values():
            monitor.start()
        logger.info("Started %d host monitor(s)", len(self._monitors))

    async def stop(self) -> None:
        await asyncio.gather(*(monitor.stop() for monitor in self._monitors.values()))
        logger.info("Stopped %d host monitor(s)", len(self._monitors))

    async def run_forever(self, records: list[AccessoryRecord]) -> None:
        self.start(records)
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()
