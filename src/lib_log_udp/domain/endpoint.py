"""Parse ``host:port`` strings into endpoint value objects."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import AddressResolutionError

_MAX_PORT = 65535


@dataclass(slots=True, frozen=True)
class Endpoint:
    """Remote datagram target split into host and port.

    An empty ``host`` means the local system, matching ``":5000"`` style
    addresses. ``port`` is an integer, or a service name such as ``"syslog"``
    left for the resolver to translate.
    """

    host: str
    port: int | str

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


def parse_address(address: str) -> Endpoint:
    """Split ``address`` into an :class:`Endpoint`.

    IPv6 literals must be bracketed. Numeric ports must lie in ``0..65535``
    and an empty port means ``0``; anything else is kept as a service name.

    Examples
    --------
    >>> parse_address("logstash.local:5000")
    Endpoint(host='logstash.local', port=5000)
    >>> parse_address("[::1]:514")
    Endpoint(host='::1', port=514)
    >>> parse_address("127.0.0.1:syslog")
    Endpoint(host='127.0.0.1', port='syslog')
    >>> parse_address("localhost")
    Traceback (most recent call last):
    ...
    lib_log_udp.domain.errors.AddressResolutionError: cannot resolve 'localhost': missing port, expected HOST:PORT
    """

    raw = address.strip()
    if raw.startswith("["):
        closing = raw.find("]")
        if closing == -1:
            raise AddressResolutionError(address, "missing ']' in address")
        host = raw[1:closing]
        rest = raw[closing + 1 :]
        if not rest.startswith(":"):
            raise AddressResolutionError(address, "missing port, expected HOST:PORT")
        port_text = rest[1:]
    else:
        host, sep, port_text = raw.rpartition(":")
        if not sep:
            raise AddressResolutionError(address, "missing port, expected HOST:PORT")
        if ":" in host:
            raise AddressResolutionError(address, "too many colons, bracket IPv6 hosts")
    return Endpoint(host=host, port=_parse_port(address, port_text))


def _parse_port(address: str, port_text: str) -> int | str:
    if not port_text:
        return 0
    if not (port_text.isascii() and port_text.isdigit()):
        return port_text
    port = int(port_text)
    if port > _MAX_PORT:
        raise AddressResolutionError(address, f"port {port} must be at most {_MAX_PORT}")
    return port


__all__ = ["Endpoint", "parse_address"]
