"""Concrete adapters for sockets, diagnostics, and system identity."""

from __future__ import annotations

from .diagnostics import LoggingDiagnostics
from .listener import DatagramListener
from .system import SystemClock, SystemHostname
from .udp import ResolvedEndpoint, UdpSocketTransport, resolve_endpoint

__all__ = [
    "DatagramListener",
    "LoggingDiagnostics",
    "ResolvedEndpoint",
    "SystemClock",
    "SystemHostname",
    "UdpSocketTransport",
    "resolve_endpoint",
]
