"""Token commands -- one CLI command per OAuth2 grant.

Implements ``tokenexchange app-token``, ``user-token`` and ``refresh``. Each
command resolves the client configuration and credentials from the options
stored on the Typer context by :func:`~tokenexchange.app.main_callback`,
performs exactly one exchange, and prints the
:class:`~tokenexchange.models.TokenResult` to stdout.

Typical workflow::

    tokenexchange authorize-url --scope chat:read
    tokenexchange user-token "$CODE"
    tokenexchange refresh "$REFRESH_TOKEN"
"""

from __future__ import annotations

from typing import Callable, Optional

import typer

from tokenexchange.client import TokenExchangeClient
from tokenexchange.config import (
    DEFAULT_CLIENT_ID_SOURCE,
    DEFAULT_CLIENT_SECRET_SOURCE,
    load_client_config,
    load_credentials,
)
from tokenexchange.exceptions import TokenExchangeError
from tokenexchange.models import DEFAULT_APP_SCOPE, DEFAULT_REDIRECT_URI, TokenResult
from tokenexchange.output import debug, error, print_token, success
from tokenexchange.transport import HttpxTransport


def _run_exchange(
    ctx: typer.Context,
    operation: Callable[[TokenExchangeClient], TokenResult],
) -> None:
    """Build a client from context options, run *operation*, print the result.

    Raises:
        typer.Exit: With the failing error's ``exit_code``.
    """
    opts = ctx.obj or {}
    try:
        config = load_client_config(token_url=opts.get("token_url"))
        credentials = load_credentials(
            opts.get("client_id_source") or DEFAULT_CLIENT_ID_SOURCE,
            opts.get("client_secret_source") or DEFAULT_CLIENT_SECRET_SOURCE,
        )
        debug(f"Token endpoint: {config.token_url}")
        with HttpxTransport(config) as transport:
            client = TokenExchangeClient(config, credentials, transport)
            result = operation(client)
    except TokenExchangeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_token(result)
    success("Token issued.")


def app_token_command(
    ctx: typer.Context,
    scope: Optional[list[str]] = typer.Option(
        None,
        "--scope",
        "-s",
        help=f"Scope to request (repeatable). Defaults to '{DEFAULT_APP_SCOPE}'.",
    ),
) -> None:
    """Get an app access token (client credentials grant)."""
    requested = " ".join(scope) if scope is not None else DEFAULT_APP_SCOPE
    _run_exchange(ctx, lambda client: client.get_app_access_token(scope=requested))


def user_token_command(
    ctx: typer.Context,
    code: str = typer.Argument(help="Authorization code from the redirect."),
    redirect_uri: str = typer.Option(
        DEFAULT_REDIRECT_URI,
        "--redirect-uri",
        help="Redirect URI used in the authorization request.",
    ),
    code_verifier: Optional[str] = typer.Option(
        None, "--code-verifier", help="PKCE code verifier, if a challenge was sent."
    ),
) -> None:
    """Exchange an authorization code for the first user access token.

    Use once, right after the user authorized the application in a
    browser. Later tokens should come from ``tokenexchange refresh``.
    """
    _run_exchange(
        ctx,
        lambda client: client.get_user_access_token(
            code, redirect_uri=redirect_uri, code_verifier=code_verifier
        ),
    )


def refresh_command(
    ctx: typer.Context,
    refresh_token: str = typer.Argument(help="Refresh token from a previous exchange."),
) -> None:
    """Exchange a refresh token for a new user access token."""
    _run_exchange(ctx, lambda client: client.refresh_user_access_token(refresh_token))
