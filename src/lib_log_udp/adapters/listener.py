"""Minimal UDP collector for local inspection of emitted envelopes.

Purpose
-------
Give operators (via ``lib_log_udp listen``) and the test-suite a stand-in for a
Logstash UDP input: bind a datagram socket and hand back raw payloads.

Contents
--------
* :class:`DatagramListener` – bound socket with ``receive``/``close`` and
  context-manager support.
"""

from __future__ import annotations

import logging
import socket

LOGGER = logging.getLogger(__name__)


class DatagramListener:
    """Receive datagrams on ``host:port`` (``port=0`` picks a free port).

    Examples
    --------
    >>> with DatagramListener() as listener:
    ...     sender = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    ...     _ = sender.sendto(b"ping", listener.sockaddr)
    ...     sender.close()
    ...     listener.receive(timeout=2.0)
    b'ping'
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 0, *, buffer_size: int = 65535) -> None:
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        self._socket = socket.socket(family, socket.SOCK_DGRAM)
        try:
            self._socket.bind((host, port))
        except OSError:
            self._socket.close()
            raise
        self._buffer_size = buffer_size
        LOGGER.debug("Listening for datagrams on %s", self.address)

    @property
    def sockaddr(self) -> tuple[str, int]:
        """Bound ``(host, port)`` pair."""
        host, port = self._socket.getsockname()[:2]
        return host, port

    @property
    def address(self) -> str:
        """Bound address in ``host:port`` form, usable by the writer."""
        host, port = self.sockaddr
        if ":" in host:
            return f"[{host}]:{port}"
        return f"{host}:{port}"

    def receive(self, timeout: float | None = None) -> bytes:
        """Block for one datagram; raises ``TimeoutError`` after ``timeout`` seconds."""
        self._socket.settimeout(timeout)
        data, peer = self._socket.recvfrom(self._buffer_size)
        LOGGER.debug("Received %d bytes from %s", len(data), peer)
        return data

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> "DatagramListener":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()


__all__ = ["DatagramListener"]
