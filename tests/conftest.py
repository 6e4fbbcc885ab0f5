from __future__ import annotations

import pytest

from pinghosts.config import get_settings


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("PINGHOSTS_CONFIG", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class ScriptedProbe:
    """Probe collaborator replaying a fixed list of results.

    Entries are booleans (alive or not) or exceptions to raise. Once the script
    runs out the last entry repeats.
    """

    def __init__(self, *results: bool | BaseException) -> None:
        self.results = list(results) or [True]
        self.calls: list[tuple[str, float, bool]] = []

    async def __call__(self, address: str, timeout: float, ipv6: bool) -> bool:
        self.calls.append((address, timeout, ipv6))
        index = min(len(self.calls), len(self.results)) - 1
        result = self.results[index]
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def scripted_probe():
    return ScriptedProbe
