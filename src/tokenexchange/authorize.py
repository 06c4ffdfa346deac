"""Authorization URL construction for the user access token flow.

Before :class:`~tokenexchange.models.AuthorizationCodeGrant` can be
exchanged, the user has to approve the application in a browser. This module
builds the URL for that step. The provider then redirects to
``redirect_uri`` with ``code`` and ``state`` query parameters.

Also exports :func:`generate_pkce_pair` for providers that accept PKCE
(:rfc:`7636`): send the challenge here and the verifier with the grant.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
from typing import Iterable, Optional
from urllib.parse import urlencode

from tokenexchange.exceptions import InvalidCredentials, InvalidGrant
from tokenexchange.models import DEFAULT_AUTHORIZE_URL


def generate_pkce_pair() -> tuple[str, str]:
    """Generate a PKCE code_verifier and code_challenge (S256).

    Returns:
        A tuple of ``(code_verifier, code_challenge)``.
    """
    # RFC 7636: 43-128 characters from unreserved character set
    code_verifier = secrets.token_urlsafe(64)[:128]
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    code_challenge = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    return code_verifier, code_challenge


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scopes: Iterable[str] = (),
    state: Optional[str] = None,
    code_challenge: Optional[str] = None,
    authorize_url: str = DEFAULT_AUTHORIZE_URL,
    force_verify: bool = False,
) -> tuple[str, str]:
    """Build the browser URL that starts the authorization code flow.

    Args:
        client_id: The application's client ID.
        redirect_uri: Where the provider sends the user back. Must be
            registered with the provider and reused in the code exchange.
        scopes: Scopes to request; joined with spaces.
        state: Anti-CSRF value echoed back on redirect. A random one is
            generated when omitted.
        code_challenge: PKCE S256 challenge from :func:`generate_pkce_pair`.
        authorize_url: The provider's authorization endpoint.
        force_verify: Ask the provider to re-prompt a user who already
            authorized the application.

    Returns:
        A tuple of ``(url, state)``. Compare ``state`` with the value on the
        redirect before exchanging the code.

    Raises:
        InvalidCredentials: If ``client_id`` is empty.
        InvalidGrant: If ``redirect_uri`` is empty.
    """
    if not client_id.strip():
        raise InvalidCredentials("Authorization URL requires a non-empty client_id")
    if not redirect_uri.strip():
        raise InvalidGrant("Authorization URL requires a non-empty redirect_uri")

    if state is None:
        state = secrets.token_urlsafe(16)

    params: dict[str, str] = {
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "state": state,
    }
    scope = " ".join(s for s in scopes if s)
    if scope:
        params["scope"] = scope
    if code_challenge:
        params["code_challenge"] = code_challenge
        params["code_challenge_method"] = "S256"
    if force_verify:
        params["force_verify"] = "true"

    return f"{authorize_url}?{urlencode(params)}", state
