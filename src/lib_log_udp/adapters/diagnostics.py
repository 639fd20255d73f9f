"""Diagnostic adapter that forwards writer events to stdlib :mod:`logging`.

The writer never owns the logging configuration; this adapter only appends
records to a logger the host application configures.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from lib_log_udp.application.ports.diagnostics import DiagnosticPort

LOGGER = logging.getLogger(__name__)

_MESSAGES: Mapping[str, str] = {
    "write_failed": (
        "Error while writing data to %(address)s. Expected to write %(expected)d, "
        "actually wrote %(written)d. Underlying error: %(error)s"
    ),
    "close_after_write_failed": "There was a subsequent error cleaning up the connection to %(address)s: %(error)s",
    "hostname_lookup_failed": "Hostname lookup failed; sending an empty host field: %(error)s",
}
#: Human-readable templates keyed by diagnostic event name.


class LoggingDiagnostics(DiagnosticPort):
    """Render diagnostic events as log records.

    Examples
    --------
    >>> records = []
    >>> class _Capture(logging.Handler):
    ...     def emit(self, record):
    ...         records.append(record.getMessage())
    >>> logger = logging.getLogger("doctest.diagnostics")
    >>> logger.addHandler(_Capture())
    >>> LoggingDiagnostics(logger=logger)("close_after_write_failed", {"address": "h:1", "error": "EBADF"})
    >>> records
    ['There was a subsequent error cleaning up the connection to h:1: EBADF']
    """

    def __init__(self, *, logger: logging.Logger | None = None, level: int = logging.WARNING) -> None:
        self._logger = logger or LOGGER
        self._level = level

    def __call__(self, name: str, payload: Mapping[str, Any]) -> None:
        template = _MESSAGES.get(name)
        if template is None:
            self._logger.log(self._level, "%s: %s", name, dict(payload))
            return
        self._logger.log(self._level, template, dict(payload))


__all__ = ["LoggingDiagnostics"]
