"""Typer application and CLI entry point for openapi-explorer.

This module builds the root Typer application, its global options and the
built-in commands (``fields``, ``field``, ``schemas``, ``endpoints``,
``stats``, ``validate``, ``browse`` and the ``config`` group).

:func:`main` is the console-script entry point declared in
``pyproject.toml``. An :class:`~openapi_explorer.exceptions.ExplorerError`
that escapes a command is printed and turned into its exit code; any other
exception is written to a crash log under the data directory.

See Also:
    :mod:`openapi_explorer.config`: Document source resolution.
    :mod:`openapi_explorer.output`: Output formatting set up in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from openapi_explorer import __version__
from openapi_explorer.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="openapi-explorer",
    help="Explore how fields, schemas and endpoints of an OpenAPI 3.x document relate.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"openapi-explorer {__version__}")
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
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="OpenAPI document: file path, URL, or '-' for stdin."
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
) -> None:
    """Root callback executed before every command.

    Loads the user config, installs the global
    :class:`~openapi_explorer.output.OutputManager` and the logging handler,
    and stores ``spec`` and ``config`` in ``ctx.obj`` for the commands.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        spec: Document source override (highest precedence).
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output and log records.
    """
    from openapi_explorer.config import load_config
    from openapi_explorer.exceptions import ConfigError
    from openapi_explorer.output import (
        OutputFormat,
        OutputManager,
        configure_logging,
        error,
        set_output,
    )

    try:
        config = load_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    fmt = OutputFormat(config.output.format)
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
    )
    set_output(output)
    configure_logging(verbose=verbose, output=output)

    ctx.ensure_object(dict)
    ctx.obj["spec"] = spec
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from openapi_explorer.commands.browse import browse_command  # noqa: E402
from openapi_explorer.commands.config import config_app  # noqa: E402
from openapi_explorer.commands.inspect import (  # noqa: E402
    endpoints_command,
    field_command,
    fields_command,
    schemas_command,
    stats_command,
    validate_command,
)

app.command("fields")(fields_command)
app.command("field")(field_command)
app.command("schemas")(schemas_command)
app.command("endpoints")(endpoints_command)
app.command("stats")(stats_command)
app.command("validate")(validate_command)
app.command("browse")(browse_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to ``<data_dir>/logs`` and return the file path."""
    from openapi_explorer.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``openapi-explorer`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from openapi_explorer.exceptions import ExplorerError
        from openapi_explorer.output import error

        if isinstance(exc, ExplorerError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
