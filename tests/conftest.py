from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any, Mapping

import pytest

from lib_log_udp.adapters.listener import DatagramListener

FIXED_MOMENT = datetime(2025, 9, 23, 12, 0, tzinfo=timezone.utc)


class _FixedClock:
    def now(self) -> datetime:
        return FIXED_MOMENT


class RecordingDiagnostics:
    """Diagnostic sink capturing ``(name, payload)`` pairs."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def fixed_clock() -> _FixedClock:
    return _FixedClock()


@pytest.fixture
def diagnostics() -> RecordingDiagnostics:
    return RecordingDiagnostics()


@pytest.fixture
def listener() -> Iterator[DatagramListener]:
    with DatagramListener() as bound:
        yield bound


@pytest.fixture
def unused_udp_address() -> str:
    """Address of a loopback UDP port nobody listens on any more."""

    with DatagramListener() as probe:
        return probe.address
