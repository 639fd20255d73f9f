from __future__ import annotations

import errno
import json
import logging
import re
import socket

import pytest

from lib_log_udp import (
    AddressResolutionError,
    CloseError,
    DatagramLogWriter,
    WriteError,
    dial_udp,
    parse_envelope,
)
from lib_log_udp.adapters.listener import DatagramListener

ENVELOPE_RE = re.compile(r'^\{"@timestamp":"[^"]+", "@version":"2", "message":"test", "host":"[^"]*"\}\n$')

EXPECTED_TEST_PAYLOAD = (
    b'{"@timestamp":"2025-09-23 12:00:00.000000 +0000 UTC", "@version":"2", "message":"test", "host":"box"}\n'
)


class _ScriptedTransport:
    """Transport whose ``send`` outcomes follow a script.

    Integers cap how many bytes are accepted, exceptions are raised, and an
    exhausted script accepts everything.
    """

    def __init__(self, script: list[int | BaseException] | None = None, close_error: OSError | None = None) -> None:
        self.script = list(script or [])
        self.close_error = close_error
        self.sent: list[bytes] = []
        self.close_calls = 0

    def send(self, data: bytes) -> int:
        self.sent.append(bytes(data))
        if not self.script:
            return len(data)
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        return min(step, len(data))

    def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class _OneByteTransport(_ScriptedTransport):
    def send(self, data: bytes) -> int:
        self.sent.append(bytes(data))
        return 1


class _Factory:
    def __init__(self, *transports: _ScriptedTransport) -> None:
        self.pending = list(transports)
        self.opened: list[_ScriptedTransport] = []
        self.addresses: list[str] = []

    def __call__(self, address: str) -> _ScriptedTransport:
        self.addresses.append(address)
        transport = self.pending.pop(0) if self.pending else _ScriptedTransport()
        self.opened.append(transport)
        return transport


def _writer(factory: _Factory, *, enable_logging: bool = False, **kwargs) -> DatagramLogWriter:
    kwargs.setdefault("hostname", lambda: "box")
    return DatagramLogWriter("collector.example:5000", enable_logging, transport_factory=factory, **kwargs)


def test_log_reaches_listener_with_full_byte_count(listener: DatagramListener) -> None:
    writer = DatagramLogWriter(listener.address, False)
    assert writer.is_open

    written = writer.log("test")
    payload = listener.receive(timeout=2.0)
    writer.close()

    assert ENVELOPE_RE.match(payload.decode("utf-8"))
    assert written == len(payload)
    assert parse_envelope(payload)["host"] == socket.gethostname()


def test_log_on_documented_port_9999() -> None:
    try:
        collector = DatagramListener("127.0.0.1", 9999)
    except OSError:
        pytest.skip("127.0.0.1:9999 is busy")
    with collector:
        writer = dial_udp("127.0.0.1:9999", enable_logging=False)
        written = writer.log("test")
        payload = collector.receive(timeout=2.0)
        writer.close()

    assert ENVELOPE_RE.match(payload.decode("utf-8"))
    assert written == len(payload)


@pytest.mark.parametrize(
    "address",
    ["localhost", "host:5000:6000", "host:70000", "::1:5000", "[::1", "", "no-such-host.invalid:5000"],
)
def test_malformed_addresses_are_rejected(address: str) -> None:
    with pytest.raises(AddressResolutionError):
        DatagramLogWriter(address, False)


def test_service_name_port_is_resolved(listener: DatagramListener, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[object, object]] = []

    def fake_getaddrinfo(host, port, *_args, **_kwargs):
        seen.append((host, port))
        return [(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP, "", listener.sockaddr)]

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)

    with DatagramLogWriter("127.0.0.1:syslog", False, hostname=lambda: "box") as writer:
        written = writer.log("test")

    assert seen == [("127.0.0.1", "syslog")]
    assert written == len(listener.receive(timeout=2.0))


def test_log_passes_undecodable_argv_bytes_through(fixed_clock) -> None:
    transport = _ScriptedTransport()
    writer = _writer(_Factory(transport), clock=fixed_clock)

    writer.log("bad \udcff")

    assert b'"message":"bad \xff"' in transport.sent[0]


def test_log_renders_exact_envelope(fixed_clock) -> None:
    factory = _Factory()
    writer = _writer(factory, clock=fixed_clock)

    written = writer.log("test")

    assert factory.opened[0].sent == [EXPECTED_TEST_PAYLOAD]
    assert written == len(EXPECTED_TEST_PAYLOAD)


def test_log_does_not_escape_message(fixed_clock) -> None:
    factory = _Factory()
    writer = _writer(factory, clock=fixed_clock)

    writer.log('say "hi"')

    payload = factory.opened[0].sent[0]
    assert b'"message":"say "hi""' in payload
    with pytest.raises(json.JSONDecodeError):
        json.loads(payload)


def test_hostname_is_looked_up_on_every_call(fixed_clock) -> None:
    names = iter(["alpha", "beta"])
    factory = _Factory()
    writer = _writer(factory, clock=fixed_clock, hostname=lambda: next(names))

    writer.log("one")
    writer.log("two")

    hosts = [json.loads(sent)["host"] for sent in factory.opened[0].sent]
    assert hosts == ["alpha", "beta"]


@pytest.mark.parametrize("enable_logging, expected_events", [(True, ["hostname_lookup_failed"]), (False, [])])
def test_hostname_failure_falls_back_to_empty(fixed_clock, diagnostics, enable_logging: bool, expected_events: list[str]) -> None:
    def broken_hostname() -> str:
        raise OSError(errno.EIO, "lookup failed")

    factory = _Factory()
    writer = _writer(factory, enable_logging=enable_logging, clock=fixed_clock, hostname=broken_hostname, diagnostic=diagnostics)

    writer.log("test")

    assert json.loads(factory.opened[0].sent[0])["host"] == ""
    assert diagnostics.names == expected_events


def test_partial_writes_continue_with_remaining_suffix() -> None:
    transport = _ScriptedTransport([3, 5])
    writer = _writer(_Factory(transport))
    data = b"0123456789abcdef"

    assert writer.write(data) == len(data)
    assert transport.sent == [data, data[3:], data[8:]]
    assert writer.is_open


@pytest.mark.parametrize("data", [b"x", b"hello world", bytes(range(256)), b'{"@version":"2"}\n' * 40])
def test_one_byte_transport_eventually_sends_everything(data: bytes) -> None:
    transport = _OneByteTransport()
    writer = _writer(_Factory(transport))

    assert writer.write(data) == len(data)
    assert len(transport.sent) == len(data)


def test_empty_write_sends_nothing() -> None:
    transport = _ScriptedTransport()
    writer = _writer(_Factory(transport))

    assert writer.write(b"") == 0
    assert transport.sent == []


def test_write_failure_closes_once_and_raises_write_error(diagnostics) -> None:
    refused = ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused")
    transport = _ScriptedTransport([4, refused])
    writer = _writer(_Factory(transport), enable_logging=True, diagnostic=diagnostics)

    with pytest.raises(WriteError) as excinfo:
        writer.write(b"0123456789")

    assert excinfo.value.bytes_written == 4
    assert excinfo.value.expected == 10
    assert excinfo.value.__cause__ is refused
    assert transport.close_calls == 1
    assert not writer.is_open
    assert diagnostics.events == [
        (
            "write_failed",
            {"address": "collector.example:5000", "expected": 10, "written": 4, "error": "Connection refused"},
        )
    ]


def test_close_failure_after_write_failure_wins(diagnostics) -> None:
    transport = _ScriptedTransport(
        [OSError(errno.ENETUNREACH, "Network is unreachable")],
        close_error=OSError(errno.EIO, "Input/output error"),
    )
    writer = _writer(_Factory(transport), enable_logging=True, diagnostic=diagnostics)

    with pytest.raises(CloseError) as excinfo:
        writer.write(b"payload")

    error = excinfo.value
    assert error.bytes_written == 0
    assert error.reason == "Input/output error"
    assert isinstance(error.write_error, WriteError)
    assert error.__cause__ is error.write_error
    assert transport.close_calls == 1
    assert not writer.is_open
    assert diagnostics.names == ["write_failed", "close_after_write_failed"]


def test_diagnostics_disabled_emit_nothing(diagnostics) -> None:
    transport = _ScriptedTransport([OSError(errno.EPIPE, "Broken pipe")])
    writer = _writer(_Factory(transport), enable_logging=False, diagnostic=diagnostics)

    with pytest.raises(WriteError):
        writer.write(b"payload")

    assert diagnostics.events == []


def test_raising_diagnostic_sink_does_not_change_outcome(caplog: pytest.LogCaptureFixture) -> None:
    def exploding_sink(name: str, payload: object) -> None:
        raise RuntimeError("sink down")

    transport = _ScriptedTransport([OSError(errno.EPIPE, "Broken pipe")])
    writer = _writer(_Factory(transport), enable_logging=True, diagnostic=exploding_sink)

    with caplog.at_level(logging.ERROR, logger="lib_log_udp.writer"):
        with pytest.raises(WriteError):
            writer.write(b"payload")

    assert transport.close_calls == 1
    assert "Diagnostic sink raised while reporting write_failed" in caplog.text


def test_default_diagnostics_go_to_stdlib_logging(caplog: pytest.LogCaptureFixture) -> None:
    transport = _ScriptedTransport([OSError(errno.EPIPE, "Broken pipe")])
    writer = _writer(_Factory(transport), enable_logging=True)

    with caplog.at_level(logging.WARNING):
        with pytest.raises(WriteError):
            writer.write(b"payload")

    assert (
        "Error while writing data to collector.example:5000. Expected to write 7, actually wrote 0. "
        "Underlying error: Broken pipe"
    ) in caplog.text


def test_double_close_raises(unused_udp_address: str) -> None:
    writer = DatagramLogWriter(unused_udp_address, False)

    writer.close()
    with pytest.raises(CloseError, match="already closed"):
        writer.close()
    assert not writer.is_open


def test_close_failure_is_reported_and_leaves_writer_closed() -> None:
    transport = _ScriptedTransport(close_error=OSError(errno.EIO, "Input/output error"))
    writer = _writer(_Factory(transport))

    with pytest.raises(CloseError) as excinfo:
        writer.close()

    assert excinfo.value.bytes_written is None
    assert excinfo.value.write_error is None
    assert not writer.is_open


def test_write_on_closed_writer_surfaces_close_error() -> None:
    writer = _writer(_Factory())
    writer.close()

    with pytest.raises(CloseError) as excinfo:
        writer.write(b"late")

    assert isinstance(excinfo.value.write_error, WriteError)
    assert excinfo.value.bytes_written == 0


def test_reopen_healthy_writer_keeps_delivering(listener: DatagramListener) -> None:
    writer = DatagramLogWriter(listener.address, False)

    writer.reopen()
    written = writer.log("test")
    payload = listener.receive(timeout=2.0)
    writer.close()

    assert writer.address == listener.address
    assert written == len(payload)
    assert ENVELOPE_RE.match(payload.decode("utf-8"))


def test_reopen_swaps_transport() -> None:
    first, second = _ScriptedTransport(), _ScriptedTransport()
    factory = _Factory(first, second)
    writer = _writer(factory)

    writer.reopen()
    writer.write(b"after")

    assert first.close_calls == 1
    assert first.sent == []
    assert second.sent == [b"after"]
    assert factory.addresses == ["collector.example:5000", "collector.example:5000"]


def test_reopen_aborts_when_close_fails() -> None:
    factory = _Factory(_ScriptedTransport(close_error=OSError(errno.EIO, "Input/output error")))
    writer = _writer(factory)

    with pytest.raises(CloseError):
        writer.reopen()

    assert len(factory.addresses) == 1
    assert not writer.is_open


def test_reopen_recovers_after_failed_write() -> None:
    broken = _ScriptedTransport([OSError(errno.EPIPE, "Broken pipe")])
    healthy = _ScriptedTransport()
    writer = _writer(_Factory(broken, healthy))

    with pytest.raises(WriteError):
        writer.write(b"lost")
    writer.reopen()

    assert writer.is_open
    assert writer.write(b"resent") == 6
    assert broken.close_calls == 1
    assert healthy.sent == [b"resent"]


def test_context_manager_closes_only_open_writers() -> None:
    transport = _ScriptedTransport([OSError(errno.EPIPE, "Broken pipe")])
    with _writer(_Factory(transport)) as writer:
        with pytest.raises(WriteError):
            writer.write(b"payload")

    assert transport.close_calls == 1

    healthy = _ScriptedTransport()
    with _writer(_Factory(healthy)):
        pass
    assert healthy.close_calls == 1


def test_repr_reports_state() -> None:
    writer = _writer(_Factory())
    assert repr(writer) == "DatagramLogWriter(address='collector.example:5000', open)"
    writer.close()
    assert repr(writer) == "DatagramLogWriter(address='collector.example:5000', closed)"
