"""Port describing the datagram transport owned by a writer."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class DatagramTransportPort(Protocol):
    """A connected datagram endpoint targeting one remote address."""

    def send(self, data: bytes) -> int:
        """Send ``data`` and return how many bytes the transport accepted.

        May accept fewer bytes than offered without raising; raises ``OSError``
        when the transport fails.
        """

    def close(self) -> None:
        """Release the endpoint; raises ``OSError`` when already closed."""


TransportFactory = Callable[[str], DatagramTransportPort]
"""Resolve a ``host:port`` address and open a transport to it."""


__all__ = ["DatagramTransportPort", "TransportFactory"]
