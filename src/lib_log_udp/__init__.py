"""Public package surface of the UDP log envelope writer.

``import lib_log_udp`` exposes the writer, its errors, and the envelope helpers;
``python -m lib_log_udp`` runs the CLI.
"""

from __future__ import annotations

from .domain import (
    AddressResolutionError,
    CloseError,
    DatagramConnectionError,
    DatagramLogError,
    Envelope,
    WriteError,
    parse_envelope,
)
from .writer import DatagramLogWriter, dial_udp


def summary_info() -> str:
    """Return the metadata banner used by the CLI ``info`` command.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """
    from . import __init__conf__

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


__all__ = [
    "AddressResolutionError",
    "CloseError",
    "DatagramConnectionError",
    "DatagramLogError",
    "DatagramLogWriter",
    "Envelope",
    "WriteError",
    "dial_udp",
    "parse_envelope",
    "summary_info",
]
