"""Datagram log writer façade: envelope, write-until-complete, self-close.

Purpose
-------
Expose the single public component host applications use to ship log lines to
a Logstash-style UDP input. The writer owns one connected datagram transport,
wraps each message in the JSON envelope, and closes itself when the transport
fails so the caller can decide whether to :meth:`DatagramLogWriter.reopen`.

Contents
--------
* :class:`DatagramLogWriter` – the writer (open/closed lifecycle).
* :func:`dial_udp` – convenience constructor.

System Role
-----------
Composition point between the domain (:mod:`lib_log_udp.domain`), the ports
(:mod:`lib_log_udp.application.ports`), and the default adapters. The writer is
not internally synchronised: callers sharing one instance across threads must
hold their own lock around every call, in particular around :meth:`close`.
"""

from __future__ import annotations

import errno
import logging
from typing import Any, Mapping

from .adapters.diagnostics import LoggingDiagnostics
from .adapters.system import SystemClock, SystemHostname
from .adapters.udp import UdpSocketTransport
from .application.ports import ClockPort, DatagramTransportPort, DiagnosticPort, HostnamePort, TransportFactory
from .domain.envelope import Envelope
from .domain.errors import CloseError, WriteError, describe_os_error

LOGGER = logging.getLogger(__name__)


class DatagramLogWriter:
    """Best-effort, synchronous writer of JSON envelopes over UDP.

    Parameters
    ----------
    address:
        Remote collector in ``host:port`` form (``[v6]:port`` for IPv6).
    enable_logging:
        When ``True`` write/close failures and hostname lookup failures are
        reported through ``diagnostic``. Diagnostics never alter return values
        or raised errors.
    diagnostic:
        Sink for diagnostic events; defaults to :class:`LoggingDiagnostics`.
    transport_factory:
        Callable opening a transport for ``address``; defaults to
        :meth:`UdpSocketTransport.open`.
    clock / hostname:
        Sources for the ``@timestamp`` and ``host`` envelope fields.

    Raises
    ------
    AddressResolutionError
        When ``address`` is malformed or does not resolve.
    DatagramConnectionError
        When the local datagram socket cannot be created or connected.

    Examples
    --------
    >>> from lib_log_udp.adapters.listener import DatagramListener
    >>> with DatagramListener() as listener:
    ...     writer = DatagramLogWriter(listener.address)
    ...     sent = writer.log("test")
    ...     payload = listener.receive(timeout=2.0)
    ...     writer.close()
    >>> sent == len(payload)
    True
    >>> b'"message":"test"' in payload
    True
    """

    def __init__(
        self,
        address: str,
        enable_logging: bool = False,
        *,
        diagnostic: DiagnosticPort | None = None,
        transport_factory: TransportFactory | None = None,
        clock: ClockPort | None = None,
        hostname: HostnamePort | None = None,
    ) -> None:
        self._address = address
        self._enable_logging = enable_logging
        self._diagnostic: DiagnosticPort = diagnostic if diagnostic is not None else LoggingDiagnostics()
        self._transport_factory: TransportFactory = transport_factory or UdpSocketTransport.open
        self._clock: ClockPort = clock or SystemClock()
        self._hostname: HostnamePort = hostname or SystemHostname()
        self._transport: DatagramTransportPort | None = None
        self._open()

    @property
    def address(self) -> str:
        return self._address

    @property
    def enable_logging(self) -> bool:
        return self._enable_logging

    @property
    def is_open(self) -> bool:
        """``True`` while the writer holds a live transport."""
        return self._transport is not None

    def _open(self) -> None:
        self._transport = self._transport_factory(self._address)

    def close(self) -> None:
        """Close the underlying socket.

        The writer counts as closed afterwards even when the close fails.
        Closing twice raises :class:`CloseError`. Must not run concurrently
        with an in-flight :meth:`write` on the same writer.
        """

        transport, self._transport = self._transport, None
        if transport is None:
            raise CloseError(self._address, "datagram socket already closed")
        try:
            transport.close()
        except OSError as exc:
            raise CloseError(self._address, describe_os_error(exc)) from exc

    def reopen(self) -> None:
        """Replace the socket with a fresh one to the same address.

        A failing close aborts before anything is reopened. A writer that is
        already closed (explicitly, or after a failed write) skips the close.
        """

        if self._transport is not None:
            self.close()
        self._open()

    def log(self, message: str) -> int:
        """Wrap ``message`` in the JSON envelope and send it.

        ``message`` is inserted verbatim; quotes, backslashes, or control
        characters produce an invalid envelope. The hostname is looked up on
        every call and falls back to ``""``. Surrogates left by undecodable
        command line bytes are sent as the original bytes.

        Returns
        -------
        int
            Length of the serialised envelope in bytes.
        """

        envelope = Envelope.build(message, moment=self._clock.now(), host=self._lookup_hostname())
        return self.write(envelope.encode())

    def write(self, data: bytes) -> int:
        """Send ``data``, looping until every byte is accepted or an error occurs.

        On a transport failure the writer closes itself exactly once and
        raises. No resend is attempted.

        Returns
        -------
        int
            ``len(data)`` on success.

        Raises
        ------
        WriteError
            The transport failed and the cleanup close succeeded;
            ``bytes_written`` holds the partial count.
        CloseError
            The transport failed and the cleanup close failed as well. The
            write failure is kept on ``write_error`` and as ``__cause__``.
        """

        expected = len(data)
        total = 0
        failure: OSError | None = None
        while total < expected:
            try:
                total += self._send(data[total:])
            except OSError as exc:
                failure = exc
                break

        if failure is None:
            return total

        reason = describe_os_error(failure)
        write_error = WriteError(self._address, bytes_written=total, expected=expected, reason=reason)
        write_error.__cause__ = failure
        self._emit_diagnostic(
            "write_failed",
            {"address": self._address, "expected": expected, "written": total, "error": reason},
        )
        try:
            self.close()
        except CloseError as close_error:
            self._emit_diagnostic("close_after_write_failed", {"address": self._address, "error": close_error.reason})
            raise CloseError(
                self._address,
                close_error.reason,
                bytes_written=total,
                write_error=write_error,
            ) from write_error
        raise write_error

    def _send(self, chunk: bytes) -> int:
        if self._transport is None:
            raise OSError(errno.EBADF, "use of closed datagram socket")
        return self._transport.send(chunk)

    def _lookup_hostname(self) -> str:
        try:
            return self._hostname()
        except (OSError, UnicodeError) as exc:
            self._emit_diagnostic("hostname_lookup_failed", {"error": describe_os_error(exc)})
            return ""

    def _emit_diagnostic(self, name: str, payload: Mapping[str, Any]) -> None:
        """Invoke the diagnostic sink while guarding against callback failures."""

        if not self._enable_logging:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Diagnostic sink raised while reporting %s", name, exc_info=diagnostic_exc)

    def __enter__(self) -> "DatagramLogWriter":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        if self.is_open:
            self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"{self.__class__.__name__}(address={self._address!r}, {state})"


def dial_udp(address: str, enable_logging: bool = False, **kwargs: Any) -> DatagramLogWriter:
    """Create an open :class:`DatagramLogWriter` for ``address``.

    Keyword arguments are forwarded to the writer's injection seams.
    """

    return DatagramLogWriter(address, enable_logging, **kwargs)


__all__ = ["DatagramLogWriter", "dial_udp"]
