"""Domain value objects and errors used by the datagram log writer."""

from __future__ import annotations

from .endpoint import Endpoint, parse_address
from .envelope import ENVELOPE_VERSION, Envelope, format_timestamp, parse_envelope
from .errors import (
    AddressResolutionError,
    CloseError,
    DatagramConnectionError,
    DatagramLogError,
    WriteError,
)

__all__ = [
    "AddressResolutionError",
    "CloseError",
    "DatagramConnectionError",
    "DatagramLogError",
    "ENVELOPE_VERSION",
    "Endpoint",
    "Envelope",
    "WriteError",
    "format_timestamp",
    "parse_address",
    "parse_envelope",
]
