"""System clock and hostname adapters used by default."""

from __future__ import annotations

import socket
from datetime import datetime

from lib_log_udp.application.ports.time import ClockPort, HostnamePort


class SystemClock(ClockPort):
    """Concrete clock port returning timezone-aware local timestamps."""

    def now(self) -> datetime:
        """Return the current local time with its UTC offset attached."""
        return datetime.now().astimezone()


class SystemHostname(HostnamePort):
    """Look up the local hostname on every call."""

    def __call__(self) -> str:
        return socket.gethostname()


__all__ = ["SystemClock", "SystemHostname"]
