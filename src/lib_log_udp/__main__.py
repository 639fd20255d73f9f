"""``python -m lib_log_udp`` entry point delegating to :func:`lib_log_udp.cli.main`."""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
