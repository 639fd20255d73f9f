"""Error hierarchy raised by the datagram log writer.

Purpose
-------
Give callers one exception family to catch while keeping the failure kinds
(resolution, socket creation, write, close) distinguishable.

Contents
--------
* :class:`DatagramLogError` – common base class.
* :class:`AddressResolutionError` – malformed or unresolvable ``host:port``.
* :class:`DatagramConnectionError` – the local datagram endpoint could not be
  created or connected.
* :class:`WriteError` – the transport failed mid-write.
* :class:`CloseError` – closing the socket failed (explicitly or after a
  failed write).

System Role
-----------
Lives in the domain layer so adapters and the writer façade translate raw
``OSError`` values into a vocabulary that does not leak socket details.
"""

from __future__ import annotations


def describe_os_error(exc: BaseException) -> str:
    """Return the most readable reason carried by ``exc``."""

    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or exc.__class__.__name__


class DatagramLogError(Exception):
    """Base class for every error raised by :mod:`lib_log_udp`."""


class AddressResolutionError(DatagramLogError, ValueError):
    """Raised when an address is not a valid, resolvable ``host:port``."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"cannot resolve {address!r}: {reason}")
        self.address = address
        self.reason = reason


class DatagramConnectionError(DatagramLogError):
    """Raised when the datagram socket cannot be created or connected."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"cannot open datagram socket to {address}: {reason}")
        self.address = address
        self.reason = reason


class WriteError(DatagramLogError):
    """Raised when the transport reports a failure before all bytes were sent.

    Attributes
    ----------
    bytes_written:
        Bytes accepted by the transport before the failure.
    expected:
        Length of the payload the caller asked to send.
    """

    def __init__(self, address: str, *, bytes_written: int, expected: int, reason: str) -> None:
        super().__init__(f"write to {address} failed after {bytes_written}/{expected} bytes: {reason}")
        self.address = address
        self.bytes_written = bytes_written
        self.expected = expected
        self.reason = reason


class CloseError(DatagramLogError):
    """Raised when closing the socket fails.

    When the close was the cleanup step of a failed write, ``bytes_written``
    holds the partial count and ``write_error`` the failure that was
    superseded; both are ``None`` for an explicit close.
    """

    def __init__(
        self,
        address: str,
        reason: str,
        *,
        bytes_written: int | None = None,
        write_error: WriteError | None = None,
    ) -> None:
        super().__init__(f"closing datagram socket to {address} failed: {reason}")
        self.address = address
        self.reason = reason
        self.bytes_written = bytes_written
        self.write_error = write_error


__all__ = [
    "AddressResolutionError",
    "CloseError",
    "DatagramConnectionError",
    "DatagramLogError",
    "WriteError",
    "describe_os_error",
]
