"""Environment and ``.env`` configuration for the CLI and host applications.

Purpose
-------
Resolve the writer's two configuration inputs (remote address and the
diagnostic toggle) from explicit arguments, environment variables, and an
optional ``.env`` file loaded with :mod:`dotenv`.

Contents
--------
* :data:`DOTENV_ENV_VAR`, :data:`ADDRESS_ENV_VAR`, :data:`ENABLE_LOGGING_ENV_VAR`.
* :func:`enable_dotenv` / :func:`should_use_dotenv` – ``.env`` handling.
* :class:`WriterSettings` / :func:`load_settings` – resolved writer inputs.

System Role
-----------
Outer layer only; the writer itself never reads the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LOG_UDP_USE_DOTENV"
ADDRESS_ENV_VAR = "LOG_UDP_ADDRESS"
ENABLE_LOGGING_ENV_VAR = "LOG_UDP_ENABLE_LOGGING"

_TRUTHY = {"1", "true", "yes", "on"}

_DOTENV_LOADED: Path | None = None


def _env_flag(value: str | None) -> bool | None:
    """Interpret ``1/true/yes/on`` style strings; ``None`` when unset or empty.

    Examples
    --------
    >>> _env_flag("On"), _env_flag("0"), _env_flag("")
    (True, False, None)
    """
    if value is None or not value.strip():
        return None
    return value.strip().lower() in _TRUTHY


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether to load ``.env``; an explicit CLI choice beats the environment.

    Examples
    --------
    >>> should_use_dotenv(explicit=None, env_value="1")
    True
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    """
    if explicit is not None:
        return explicit
    return bool(_env_flag(env_value))


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` upward from ``search_from`` (default: cwd).

    Existing environment variables keep precedence. Returns the loaded path, or
    ``None`` when no file was found. Repeated calls reuse the first result.
    """

    global _DOTENV_LOADED
    if _DOTENV_LOADED is not None:
        return _DOTENV_LOADED

    if search_from is None:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    else:
        candidate = _find_upwards(search_from.resolve())
    if candidate is None:
        LOGGER.debug("No .env file found")
        return None

    resolved = candidate.resolve()
    load_dotenv(resolved, override=False)
    LOGGER.debug("Loaded environment from %s", resolved)
    _DOTENV_LOADED = resolved
    return resolved


def _find_upwards(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    _DOTENV_LOADED = None


@dataclass(slots=True, frozen=True)
class WriterSettings:
    """Resolved inputs for :class:`lib_log_udp.DatagramLogWriter`."""

    address: str | None
    enable_logging: bool = False


def load_settings(*, address: str | None = None, enable_logging: bool | None = None) -> WriterSettings:
    """Combine explicit arguments with ``LOG_UDP_*`` environment variables.

    Examples
    --------
    >>> load_settings(address="127.0.0.1:5000", enable_logging=True)
    WriterSettings(address='127.0.0.1:5000', enable_logging=True)
    """

    resolved_address = address or os.getenv(ADDRESS_ENV_VAR) or None
    if enable_logging is None:
        enable_logging = bool(_env_flag(os.getenv(ENABLE_LOGGING_ENV_VAR)))
    return WriterSettings(address=resolved_address, enable_logging=enable_logging)


__all__ = [
    "ADDRESS_ENV_VAR",
    "DOTENV_ENV_VAR",
    "ENABLE_LOGGING_ENV_VAR",
    "WriterSettings",
    "enable_dotenv",
    "load_settings",
    "should_use_dotenv",
]
