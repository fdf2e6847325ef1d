"""Typer application factory and CLI entry point for cmdschemas.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``extract``, ``preview``, ``validate``, ``inspect``,
``config``, ``cache``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, registers commands, and
finally invokes the Typer app. :class:`~cmdschemas.exceptions.CmdSchemasError`
instances exit with their own code; anything else is written to a crash log
under the data directory.

See Also:
    :mod:`cmdschemas.config`: Configuration resolution.
    :mod:`cmdschemas.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from cmdschemas import __version__
from cmdschemas.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="cmdschemas",
    help="Extract flat command schemas from botocore service models.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"cmdschemas {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~cmdschemas.output.OutputManager` and
    stores shared options in the Typer context so that sub-commands can read
    them via ``ctx.obj``.  ``--json``/``--plain`` win over the configured
    ``output.format``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        force: Skip interactive confirmations.

    Raises:
        InvalidUsageError: If both ``--json`` and ``--plain`` are given.
        typer.Exit: With the config error's exit code when the configuration
            cannot be resolved (except for the ``config`` sub-commands).
    """
    from cmdschemas.config import resolve_config
    from cmdschemas.exceptions import ConfigError, InvalidUsageError
    from cmdschemas.output import OutputFormat, OutputManager, error, set_output

    if json_output and plain_output:
        raise InvalidUsageError("--json and --plain cannot be used together")

    cli_format = "json" if json_output else "plain" if plain_output else None
    fmt = OutputFormat(cli_format) if cli_format else OutputFormat.AUTO
    try:
        fmt = OutputFormat(resolve_config(cli_format=cli_format).output.format)
    except ConfigError as exc:
        # The config sub-commands report or repair a broken config themselves.
        if ctx.invoked_subcommand != "config":
            set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))
            error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from cmdschemas.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def register_commands() -> None:
    """Attach the built-in sub-commands to :data:`app`.

    Safe to call more than once; commands already registered are skipped.
    """
    from cmdschemas.commands.cache import cache_app
    from cmdschemas.commands.config import config_app
    from cmdschemas.commands.extract import extract_command
    from cmdschemas.commands.inspect import inspect_app
    from cmdschemas.commands.preview import preview_command
    from cmdschemas.commands.validate import validate_command

    if getattr(app, "_cmdschemas_registered", False):
        return

    app.command("extract")(extract_command)
    app.command("preview")(preview_command)
    app.command("validate")(validate_command)
    app.add_typer(inspect_app, name="inspect", help="Look up schemas in a persisted corpus.")
    app.add_typer(config_app, name="config", help="Configuration management.")
    app.add_typer(cache_app, name="cache", help="Remote service-model cache.")
    app._cmdschemas_registered = True  # type: ignore[attr-defined]


def main() -> None:
    """CLI entry point invoked by the ``cmdschemas`` console script.

    Performs the following sequence:

    1. Install signal handlers for clean Ctrl-C behaviour.
    2. Register built-in sub-commands.
    3. Invoke the Typer application.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from cmdschemas.exceptions import CmdSchemasError
        from cmdschemas.output import error

        if isinstance(exc, CmdSchemasError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
