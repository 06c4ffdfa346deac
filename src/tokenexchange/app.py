"""Typer application and CLI entry point for tokenexchange.

This module wires together the top-level Typer application and registers the
built-in commands (``app-token``, ``user-token``, ``refresh``,
``authorize-url``). The CLI is a thin caller of
:class:`~tokenexchange.client.TokenExchangeClient`: it sources configuration
and credentials, runs one exchange, and prints the result.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.

See Also:
    :mod:`tokenexchange.config`: Configuration and credential resolution.
    :mod:`tokenexchange.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from tokenexchange import __version__
from tokenexchange.commands.authorize import authorize_url_command
from tokenexchange.commands.token import (
    app_token_command,
    refresh_command,
    user_token_command,
)
from tokenexchange.config import DEFAULT_CLIENT_ID_SOURCE, DEFAULT_CLIENT_SECRET_SOURCE
from tokenexchange.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="tokenexchange",
    help="Request OAuth2 access tokens from a provider's token endpoint.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("app-token")(app_token_command)
app.command("user-token")(user_token_command)
app.command("refresh")(refresh_command)
app.command("authorize-url")(authorize_url_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"tokenexchange {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send library log records to stderr; DEBUG with ``--verbose``, else WARNING."""
    logging.basicConfig(stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("tokenexchange").setLevel(logging.DEBUG if verbose else logging.WARNING)


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
    token_url: Optional[str] = typer.Option(
        None, "--token-url", help="Token endpoint URL (env: TOKENEXCHANGE_TOKEN_URL)."
    ),
    authorize_url: Optional[str] = typer.Option(
        None,
        "--authorize-url",
        help="Authorization endpoint URL (env: TOKENEXCHANGE_AUTHORIZE_URL).",
    ),
    client_id_source: str = typer.Option(
        DEFAULT_CLIENT_ID_SOURCE,
        "--client-id-source",
        help="Client ID source: env:VAR, file:/path, or prompt.",
    ),
    client_secret_source: str = typer.Option(
        DEFAULT_CLIENT_SECRET_SOURCE,
        "--client-secret-source",
        help="Client secret source: env:VAR, file:/path, or prompt.",
    ),
) -> None:
    """Root callback executed before every command.

    Initialises the global :class:`~tokenexchange.output.OutputManager` and
    logging from CLI flags, and stores endpoint overrides and credential
    sources in ``ctx.obj`` for the commands.
    """
    from tokenexchange.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["token_url"] = token_url
    ctx.obj["authorize_url"] = authorize_url
    ctx.obj["client_id_source"] = client_id_source
    ctx.obj["client_secret_source"] = client_secret_source


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``tokenexchange`` console script.

    Commands turn :class:`~tokenexchange.exceptions.TokenExchangeError` into
    an exit code themselves; anything else escaping the Typer app is
    reported here and exits with :data:`EXIT_GENERIC_FAILURE`.

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
        from tokenexchange.exceptions import TokenExchangeError
        from tokenexchange.output import error

        if isinstance(exc, TokenExchangeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
