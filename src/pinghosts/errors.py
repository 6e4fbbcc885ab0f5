from __future__ import annotations


class PingHostsError(Exception):
    """Base class for pinghosts errors."""


class ConfigurationError(PingHostsError, ValueError):
    """A host entry cannot be used as configured."""


class TooManyHostsError(ConfigurationError):
    """More hosts are configured than the monitor supports."""


class ResolutionError(PingHostsError):
    """No probe address could be determined for this cycle."""


class ProbeError(PingHostsError):
    """A single probe attempt failed with a timeout or transport error."""
