"""Authorize command -- print the browser URL that starts the user flow.

Implements ``tokenexchange authorize-url``. The URL goes to stdout; the
``state`` value (and the PKCE verifier with ``--pkce``) go to stderr so that
``URL=$(tokenexchange authorize-url)`` captures only the URL. With ``--json``
all values are printed together as one object on stdout.
"""

from __future__ import annotations

from typing import Optional

import typer

from tokenexchange.authorize import build_authorization_url, generate_pkce_pair
from tokenexchange.config import DEFAULT_CLIENT_ID_SOURCE, load_client_config, resolve_credential
from tokenexchange.exceptions import TokenExchangeError
from tokenexchange.models import DEFAULT_REDIRECT_URI
from tokenexchange.output import OutputFormat, error, get_output, info


def authorize_url_command(
    ctx: typer.Context,
    redirect_uri: str = typer.Option(
        DEFAULT_REDIRECT_URI, "--redirect-uri", help="Where the provider redirects back."
    ),
    scope: Optional[list[str]] = typer.Option(
        None, "--scope", "-s", help="Scope to request (repeatable)."
    ),
    state: Optional[str] = typer.Option(
        None, "--state", help="State value to echo back (random if omitted)."
    ),
    pkce: bool = typer.Option(False, "--pkce", help="Add an S256 PKCE challenge."),
    force_verify: bool = typer.Option(
        False, "--force-verify", help="Re-prompt users who already authorized the app."
    ),
) -> None:
    """Print the authorization URL for the user access token flow.

    Raises:
        typer.Exit: With the failing error's ``exit_code`` if the client ID
            cannot be resolved or is empty.
    """
    opts = ctx.obj or {}
    code_verifier: Optional[str] = None
    code_challenge: Optional[str] = None
    if pkce:
        code_verifier, code_challenge = generate_pkce_pair()

    try:
        config = load_client_config(authorize_url=opts.get("authorize_url"))
        client_id = resolve_credential(opts.get("client_id_source") or DEFAULT_CLIENT_ID_SOURCE)
        url, state = build_authorization_url(
            client_id,
            redirect_uri,
            scopes=scope or (),
            state=state,
            code_challenge=code_challenge,
            authorize_url=config.authorize_url,
            force_verify=force_verify,
        )
    except TokenExchangeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    output = get_output()
    if output.format == OutputFormat.JSON:
        data = {"url": url, "state": state}
        if code_verifier:
            data["code_verifier"] = code_verifier
        output.format_response(data)
        return

    output.print_data(url)
    info(f"State: {state}")
    if code_verifier:
        info(f"Code verifier: {code_verifier}")
