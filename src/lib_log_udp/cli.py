"""Command line interface built on rich-click and lib_cli_exit_tools.

Purpose
-------
Let operators push test messages to a collector (``send``), watch what a
collector would receive (``listen``), and print package metadata (``info``)
without writing Python.

Contents
--------
* :func:`cli` – root group with traceback and ``.env`` toggles.
* :func:`cli_info`, :func:`cli_send`, :func:`cli_listen` – subcommands.
* :func:`main` – entry point used by ``python -m lib_log_udp`` and the
  ``lib_log_udp`` console script.
"""

from __future__ import annotations

import logging
import os
from typing import Sequence

import lib_cli_exit_tools
import rich_click as click
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from . import __init__conf__
from . import config as log_config
from . import summary_info
from .adapters.listener import DatagramListener
from .domain.envelope import parse_envelope
from .domain.errors import DatagramLogError
from .writer import dial_udp

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

DEFAULT_LISTEN_PORT = 5000


def _explicit(ctx: click.Context, name: str) -> bool:
    """Return ``True`` when ``name`` was given on the command line."""
    return ctx.get_parameter_source(name) is not ParameterSource.DEFAULT


def _install_diagnostic_handler() -> None:
    """Route diagnostic records to stderr through Rich unless already handled."""
    logger = logging.getLogger("lib_log_udp")
    if logger.handlers:
        return
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(logging.WARNING)


@click.group(help=__init__conf__.title, context_settings=CLICK_CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from the nearest .env (overrides ${log_config.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command storing global flags and loading ``.env`` when asked."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit = use_dotenv if _explicit(ctx, "use_dotenv") else None
    if log_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""
    click.echo(summary_info(), nl=False)


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("messages", nargs=-1, required=True)
@click.option(
    "--address",
    "-a",
    default=None,
    help=f"Collector HOST:PORT (defaults to ${log_config.ADDRESS_ENV_VAR}).",
)
@click.option(
    "--diagnostics/--no-diagnostics",
    default=False,
    help=f"Report write/close failures on stderr (defaults to ${log_config.ENABLE_LOGGING_ENV_VAR}).",
)
@click.pass_context
def cli_send(ctx: click.Context, messages: tuple[str, ...], address: str | None, diagnostics: bool) -> None:
    """Send each MESSAGE as one JSON envelope datagram."""

    explicit = diagnostics if _explicit(ctx, "diagnostics") else None
    settings = log_config.load_settings(address=address, enable_logging=explicit)
    if settings.address is None:
        raise click.UsageError(f"No collector address; pass --address or set {log_config.ADDRESS_ENV_VAR}.")
    if settings.enable_logging:
        _install_diagnostic_handler()

    try:
        with dial_udp(settings.address, settings.enable_logging) as writer:
            for message in messages:
                written = writer.log(message)
                click.echo(f"sent {written} bytes to {settings.address}")
    except DatagramLogError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("listen", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option(
    "--port",
    "-p",
    type=click.IntRange(0, 65535),
    default=DEFAULT_LISTEN_PORT,
    show_default=True,
    help="UDP port to bind (0 picks a free port).",
)
@click.option(
    "--count",
    "-n",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Stop after this many datagrams (0 runs until interrupted).",
)
@click.option("--timeout", type=float, default=None, help="Fail when no datagram arrives within this many seconds.")
def cli_listen(host: str, port: int, count: int, timeout: float | None) -> None:
    """Print envelopes received on HOST:PORT."""

    console = Console()
    with DatagramListener(host, port) as listener:
        console.print(Text(f"listening on {listener.address}", style="dim"))
        received = 0
        while count == 0 or received < count:
            try:
                payload = listener.receive(timeout=timeout)
            except TimeoutError as exc:
                raise click.ClickException(f"no datagram received within {timeout} seconds") from exc
            received += 1
            _render_payload(console, payload)


def _render_payload(console: Console, payload: bytes) -> None:
    try:
        fields = parse_envelope(payload)
    except ValueError:
        console.print(Text.assemble(("invalid envelope: ", "yellow"), repr(payload)))
        return
    console.print_json(data=fields)


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through :func:`lib_cli_exit_tools.run_cli` and return its exit code.

    Traceback preferences toggled by ``--traceback`` are restored afterwards so
    embedding callers and tests see the configuration they started with.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
