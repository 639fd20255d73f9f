"""Port for side-channel diagnostic events emitted by the writer."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class DiagnosticPort(Protocol):
    """Record a named diagnostic event with a structured payload."""

    def __call__(self, name: str, payload: Mapping[str, Any]) -> None: ...


__all__ = ["DiagnosticPort"]
