"""Socket-backed UDP transport implementing :class:`DatagramTransportPort`.

Purpose
-------
Resolve ``host:port`` addresses and hold a connected ``SOCK_DGRAM`` socket so
the writer only ever deals with ``send`` and ``close``.

Contents
--------
* :class:`ResolvedEndpoint` – parsed endpoint plus the address family and
  socket address chosen by ``getaddrinfo``.
* :func:`resolve_endpoint` – parsing and name resolution.
* :class:`UdpSocketTransport` – the concrete transport; :meth:`UdpSocketTransport.open`
  is the default :data:`TransportFactory`.

System Role
-----------
Outermost I/O adapter. Translates ``socket.gaierror`` and ``OSError`` raised
while opening into :class:`AddressResolutionError` and
:class:`DatagramConnectionError`; send/close failures stay ``OSError`` for the
writer to interpret.
"""

from __future__ import annotations

import errno
import logging
import socket
from dataclasses import dataclass
from typing import Any

from lib_log_udp.application.ports.transport import DatagramTransportPort
from lib_log_udp.domain.endpoint import Endpoint, parse_address
from lib_log_udp.domain.errors import AddressResolutionError, DatagramConnectionError, describe_os_error

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ResolvedEndpoint:
    """Endpoint together with the socket parameters it resolved to."""

    endpoint: Endpoint
    family: int
    sockaddr: tuple[Any, ...]


def resolve_endpoint(address: str) -> ResolvedEndpoint:
    """Parse and resolve ``address`` for datagram use.

    The first IPv4 result wins when the resolver offers one, otherwise the
    first result of any family. An empty host resolves to the loopback
    interface and service names such as ``syslog`` are translated to ports.

    Examples
    --------
    >>> resolved = resolve_endpoint("127.0.0.1:5000")
    >>> resolved.sockaddr
    ('127.0.0.1', 5000)
    """

    endpoint = parse_address(address)
    try:
        infos = socket.getaddrinfo(endpoint.host or None, endpoint.port, type=socket.SOCK_DGRAM)
    except socket.gaierror as exc:
        raise AddressResolutionError(address, describe_os_error(exc)) from exc
    except UnicodeError as exc:
        raise AddressResolutionError(address, f"invalid hostname: {exc}") from exc
    if not infos:
        raise AddressResolutionError(address, "no addresses returned")
    chosen = next((info for info in infos if info[0] == socket.AF_INET), infos[0])
    family, _type, _proto, _canonname, sockaddr = chosen
    return ResolvedEndpoint(endpoint=endpoint, family=family, sockaddr=tuple(sockaddr))


class UdpSocketTransport(DatagramTransportPort):
    """Connected UDP socket with non-idempotent close semantics."""

    def __init__(self, sock: socket.socket) -> None:
        self._socket = sock
        self._closed = False

    @classmethod
    def open(cls, address: str) -> "UdpSocketTransport":
        """Resolve ``address`` and connect a fresh datagram socket to it."""

        resolved = resolve_endpoint(address)
        try:
            sock = socket.socket(resolved.family, socket.SOCK_DGRAM)
        except OSError as exc:
            raise DatagramConnectionError(address, describe_os_error(exc)) from exc
        try:
            sock.connect(resolved.sockaddr)
        except OSError as exc:
            sock.close()
            raise DatagramConnectionError(address, describe_os_error(exc)) from exc
        LOGGER.debug("Opened datagram socket to %s (%s)", resolved.endpoint, resolved.sockaddr)
        return cls(sock)

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, data: bytes) -> int:
        """Send ``data`` once and return the count the kernel accepted."""
        if self._closed:
            raise OSError(errno.EBADF, "use of closed datagram socket")
        return self._socket.send(data)

    def close(self) -> None:
        """Close the socket; a second call raises ``OSError``."""
        if self._closed:
            raise OSError(errno.EBADF, "datagram socket already closed")
        self._closed = True
        self._socket.close()


__all__ = ["ResolvedEndpoint", "UdpSocketTransport", "resolve_endpoint"]
