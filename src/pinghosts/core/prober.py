from __future__ import annotations

import asyncio
import logging

from pinghosts.errors import ProbeError
from pinghosts.models import ProbeOutcome, ResolvedTarget

from .collaborators import Prober, icmp_probe

logger = logging.getLogger(__name__)


class LivenessProber:
    """Run up to ``retries`` sequential probe attempts against one target."""

    def __init__(
        self,
        name: str,
        timeout: float,
        retries: int,
        probe: Prober = icmp_probe,
    ) -> None:
        self._name = name
        self._timeout = timeout
        self._retries = max(retries, 1)
        self._probe = probe

    @property
    def retries(self) -> int:
        return self._retries

    async def _attempt(self, target: ResolvedTarget) -> None:
        try:
            alive = await asyncio.wait_for(
                self._probe(target.address, self._timeout, target.ipv6),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, TimeoutError) as exc:
            raise ProbeError(
                f"no reply from {target.address} within {self._timeout}s"
            ) from exc
        except OSError as exc:
            raise ProbeError(f"transport error for {target.address}: {exc}") from exc
        if not alive:
            raise ProbeError(f"{target.address} not alive")

    async def run(self, target: ResolvedTarget) -> ProbeOutcome:
        last_error: ProbeError | None = None
        for attempt in range(1, self._retries + 1):
            try:
                await self._attempt(target)
            except ProbeError as exc:
                last_error = exc
                if attempt < self._retries:
                    logger.debug(
                        "[%s] attempt %d/%d failed (%s), retrying",
                        self._name,
                        attempt,
                        self._retries,
                        exc,
                    )
                continue
            logger.debug("[%s] success for %s", self._name, target.address)
            return ProbeOutcome(alive=True, attempts=attempt)

        return ProbeOutcome(alive=False, attempts=self._retries, last_error=last_error)
