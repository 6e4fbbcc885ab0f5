from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from pinghosts.errors import ConfigurationError, TooManyHostsError
from pinghosts.models import HostConfig

logger = logging.getLogger(__name__)

MAX_HOSTS = 100


@dataclass
class RejectedHost:
    label: str
    error: ConfigurationError


@dataclass
class HostParseResult:
    hosts: list[HostConfig] = field(default_factory=list)
    rejected: list[RejectedHost] = field(default_factory=list)


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _label(entry: Any, index: int) -> str:
    if isinstance(entry, dict):
        name = str(entry.get("name") or "").strip()
        if name:
            return name
    return f"hosts[{index}]"


def check_host_limit(entries: list[Any]) -> None:
    if len(entries) > MAX_HOSTS:
        raise TooManyHostsError(
            f"{len(entries)} hosts configured, at most {MAX_HOSTS} are supported"
        )


def parse_host(entry: Any) -> HostConfig:
    """Validate a single config entry, raising ConfigurationError when unusable."""
    try:
        return HostConfig.model_validate(entry)
    except ValidationError as exc:
        raise ConfigurationError(_describe(exc)) from exc


def parse_hosts(entries: list[Any]) -> HostParseResult:
    """Validate host entries one by one.

    A bad entry is logged and reported in ``rejected``; the remaining hosts still
    load. Exceeding ``MAX_HOSTS`` fails the whole set before anything is parsed.
    """
    check_host_limit(entries)

    result = HostParseResult()
    seen: set[str] = set()

    for index, entry in enumerate(entries):
        label = _label(entry, index)
        try:
            host = parse_host(entry)
            if host.name in seen:
                raise ConfigurationError(f"duplicate host name '{host.name}'")
        except ConfigurationError as exc:
            logger.warning("[%s] rejected host config: %s", label, exc)
            result.rejected.append(RejectedHost(label=label, error=exc))
            continue

        unknown = HostConfig.unknown_keys(entry) if isinstance(entry, dict) else []
        if unknown:
            logger.warning(
                "[%s] ignoring unknown key(s): %s", host.name, ", ".join(unknown)
            )
        for ignored in host.ignored_addresses:
            logger.warning(
                "[%s] multiple addresses specified, %s ignored in favour of %s",
                host.name,
                ignored,
                host.address_source.value,
            )
        seen.add(host.name)
        result.hosts.append(host)

    return result
