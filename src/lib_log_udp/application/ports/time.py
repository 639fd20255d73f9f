"""Ports for wall-clock time and local host identity."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockPort(Protocol):
    """Provide the current timezone-aware timestamp."""

    def now(self) -> datetime: ...


@runtime_checkable
class HostnamePort(Protocol):
    """Return the local machine's hostname, raising ``OSError`` on failure."""

    def __call__(self) -> str: ...


__all__ = ["ClockPort", "HostnamePort"]
