"""JSON envelope wrapped around every outgoing log message.

Purpose
-------
Own the wire template understood by Logstash-style UDP inputs so the writer,
the listener, and the tests agree on one byte layout.

Contents
--------
* :data:`ENVELOPE_TEMPLATE` / :data:`ENVELOPE_VERSION` – wire constants.
* :class:`Envelope` – immutable value object rendering one datagram.
* :func:`format_timestamp` – human-readable timestamp used in ``@timestamp``.
* :func:`parse_envelope` – decode a received datagram back into fields.

System Role
-----------
Domain layer; no I/O. The ``message`` field is interpolated verbatim without
JSON escaping, so callers must keep quotes, backslashes, and control
characters out of their messages.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

ENVELOPE_VERSION = "2"

ENVELOPE_TEMPLATE = '{{"@timestamp":"{timestamp}", "@version":"{version}", "message":"{message}", "host":"{host}"}}\n'

ENVELOPE_FIELDS = ("@timestamp", "@version", "message", "host")

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f %z %Z"


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``YYYY-MM-DD HH:MM:SS.ffffff +ZZZZ TZ``.

    Examples
    --------
    >>> from datetime import timezone
    >>> format_timestamp(datetime(2025, 9, 23, 12, 30, 5, 42, tzinfo=timezone.utc))
    '2025-09-23 12:30:05.000042 +0000 UTC'
    """

    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        raise ValueError("timestamp must be timezone-aware")
    return moment.strftime(_TIMESTAMP_FORMAT)


@dataclass(slots=True, frozen=True)
class Envelope:
    """One log message ready for transmission.

    Attributes
    ----------
    timestamp:
        Pre-formatted timestamp string (see :func:`format_timestamp`).
    message:
        Caller-supplied text, inserted without escaping.
    host:
        Local hostname, or ``""`` when the lookup failed.
    version:
        Envelope schema version; always ``"2"`` on the wire.
    """

    timestamp: str
    message: str
    host: str
    version: str = ENVELOPE_VERSION

    @classmethod
    def build(cls, message: str, *, moment: datetime, host: str) -> "Envelope":
        """Create an envelope stamped with ``moment``."""

        return cls(timestamp=format_timestamp(moment), message=message, host=host)

    def render(self) -> str:
        """Return the newline-terminated JSON text for this envelope.

        Examples
        --------
        >>> Envelope(timestamp="t", message="test", host="box").render()
        '{"@timestamp":"t", "@version":"2", "message":"test", "host":"box"}\\n'
        """

        return ENVELOPE_TEMPLATE.format(
            timestamp=self.timestamp,
            version=self.version,
            message=self.message,
            host=self.host,
        )

    def encode(self) -> bytes:
        """Return the UTF-8 datagram payload.

        Lone surrogates in U+DC80..U+DCFF, which is how Python decodes
        undecodable command line bytes, are written back as those raw bytes.

        Examples
        --------
        >>> Envelope(timestamp="t", message="bad \\udcff", host="h").encode()
        b'{"@timestamp":"t", "@version":"2", "message":"bad \\xff", "host":"h"}\\n'
        """

        return self.render().encode("utf-8", "surrogateescape")


def parse_envelope(payload: bytes) -> dict[str, Any]:
    """Decode a received datagram into its envelope fields.

    Raises
    ------
    ValueError
        When the payload is not newline-terminated JSON carrying exactly the
        envelope fields. Messages that contained JSON-breaking characters end
        up here because the writer does not escape them.
    """

    text = payload.decode("utf-8")
    if not text.endswith("\n"):
        raise ValueError("envelope must end with a newline")
    fields = json.loads(text[:-1])
    if not isinstance(fields, dict) or tuple(fields) != ENVELOPE_FIELDS:
        raise ValueError(f"envelope must contain exactly {', '.join(ENVELOPE_FIELDS)}")
    return fields


__all__ = [
    "ENVELOPE_FIELDS",
    "ENVELOPE_TEMPLATE",
    "ENVELOPE_VERSION",
    "Envelope",
    "format_timestamp",
    "parse_envelope",
]
