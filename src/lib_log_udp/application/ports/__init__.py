"""Protocols the writer depends on; adapters provide the implementations."""

from __future__ import annotations

from .diagnostics import DiagnosticPort
from .time import ClockPort, HostnamePort
from .transport import DatagramTransportPort, TransportFactory

__all__ = [
    "ClockPort",
    "DatagramTransportPort",
    "DiagnosticPort",
    "HostnamePort",
    "TransportFactory",
]
