"""tokenexchange -- a minimal OAuth2 token endpoint client.

Turns one of three OAuth2 grants into an access token with a single POST to a
provider's token endpoint (Twitch by default):

* client credentials -- an app access token,
* authorization code -- the first user access token after browser consent,
* refresh token -- later user access tokens.

There is no retry, caching, or token storage; each call is independent and
every failure surfaces as a :class:`~tokenexchange.exceptions.TokenError`
subclass.

Typical usage::

    from tokenexchange import Credentials, TokenExchangeClient

    creds = Credentials(client_id="...", client_secret="...")
    with TokenExchangeClient(credentials=creds) as client:
        token = client.get_app_access_token()

Modules:
    client: Synchronous and asynchronous exchange clients.
    models: Pydantic models for credentials, grants, and results.
    transport: Transport protocols and httpx-backed implementations.
    authorize: Authorization URL and PKCE helpers.
    config: Environment and credential-source resolution for callers.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from tokenexchange.client import AsyncTokenExchangeClient, TokenExchangeClient
from tokenexchange.exceptions import (
    InvalidCredentials,
    InvalidGrant,
    MalformedResponse,
    ProviderError,
    TokenError,
    TokenExchangeError,
    TransportError,
)
from tokenexchange.models import (
    AuthorizationCodeGrant,
    ClientConfig,
    ClientCredentialsGrant,
    Credentials,
    GrantRequest,
    RefreshTokenGrant,
    TokenResult,
)

__all__ = [
    "__version__",
    "TokenExchangeClient",
    "AsyncTokenExchangeClient",
    "Credentials",
    "ClientConfig",
    "ClientCredentialsGrant",
    "AuthorizationCodeGrant",
    "RefreshTokenGrant",
    "GrantRequest",
    "TokenResult",
    "TokenExchangeError",
    "TokenError",
    "InvalidCredentials",
    "InvalidGrant",
    "TransportError",
    "MalformedResponse",
    "ProviderError",
]
