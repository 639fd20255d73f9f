"""Static package metadata surfaced by the CLI ``info`` command.

Keep these values in sync with ``pyproject.toml``.
"""

from __future__ import annotations

from typing import Callable

name = "lib_log_udp"
title = "Ship JSON log envelopes to Logstash-style collectors over UDP"
version = "0.1.0"
shell_command = "lib_log_udp"


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Print the metadata banner, or hand it to ``writer`` when given.

    Examples
    --------
    >>> print_info()  # doctest: +ELLIPSIS
    Info for lib_log_udp:
    <BLANKLINE>
        name...= lib_log_udp
    ...
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    text = "\n".join(lines) + "\n"
    if writer is None:
        print(text, end="")
    else:
        writer(text)
