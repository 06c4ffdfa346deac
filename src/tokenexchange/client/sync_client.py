"""Synchronous OAuth2 token exchange client.

This module provides :class:`TokenExchangeClient`, the blocking client used
by the ``tokenexchange`` CLI and by library callers. One call to
:meth:`~TokenExchangeClient.exchange` is one token request:

1. credentials and grant fields are checked
   (:func:`~tokenexchange.client.request.build_token_request`),
2. the request is sent through the injected
   :class:`~tokenexchange.transport.Transport`,
3. the response is classified
   (:func:`~tokenexchange.client.response.parse_token_response`).

There is no retry, caching, or token storage. The client keeps no state
between calls, so one instance may be shared across threads as long as the
transport allows it (:class:`httpx.Client` does).

See Also:
    :class:`~tokenexchange.client.async_client.AsyncTokenExchangeClient`
    for the equivalent non-blocking implementation.
"""

from __future__ import annotations

import logging
from typing import Optional

from tokenexchange.client.request import build_token_request, resolve_credentials
from tokenexchange.client.response import parse_token_response
from tokenexchange.exceptions import ProviderError, TransportError
from tokenexchange.models import (
    DEFAULT_APP_SCOPE,
    DEFAULT_REDIRECT_URI,
    AuthorizationCodeGrant,
    ClientConfig,
    ClientCredentialsGrant,
    Credentials,
    GrantRequest,
    RefreshTokenGrant,
    TokenResult,
)
from tokenexchange.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class TokenExchangeClient:
    """Blocking client for an OAuth2 token endpoint.

    Args:
        config: Endpoint URLs and HTTP settings. Defaults to
            :class:`~tokenexchange.models.ClientConfig` defaults.
        credentials: Default client credentials, used when a call does not
            pass its own.
        transport: Anything satisfying
            :class:`~tokenexchange.transport.Transport`. When omitted an
            :class:`~tokenexchange.transport.HttpxTransport` is created and
            closed together with this client.

    Example::

        with TokenExchangeClient(credentials=creds) as client:
            token = client.get_app_access_token()
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        credentials: Optional[Credentials] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._credentials = credentials
        self._owned_transport: Optional[HttpxTransport] = None
        if transport is None:
            self._owned_transport = HttpxTransport(self._config)
            transport = self._owned_transport
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> TokenExchangeClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owned_transport is not None:
            self._owned_transport.close()
            self._owned_transport = None

    # ------------------------------------------------------------------ #
    # Exchange
    # ------------------------------------------------------------------ #

    def exchange(
        self,
        grant: GrantRequest,
        credentials: Optional[Credentials] = None,
    ) -> TokenResult:
        """Exchange *grant* for a token.

        Args:
            grant: The grant to send.
            credentials: Overrides the client's default credentials for
                this call only.

        Returns:
            The parsed :class:`~tokenexchange.models.TokenResult`.

        Raises:
            InvalidCredentials: If credentials are missing or empty. No
                request is sent.
            InvalidGrant: If the grant is missing a required field. No
                request is sent.
            TransportError: On connection or timeout failure, including an
                :class:`OSError` raised by a custom transport.
            MalformedResponse: If the body is not a usable token response.
            ProviderError: If the provider rejected the grant.
        """
        creds = resolve_credentials(credentials, self._credentials)
        request = build_token_request(self._config.token_url, creds, grant)

        logger.debug("Requesting %s token from %s", grant.grant_type, request.url)
        try:
            response = self._transport.send(request)
        except OSError as exc:
            logger.warning("Token request to %s failed: %s", request.url, exc)
            raise TransportError(f"Token request failed: {exc}", cause=exc) from exc
        logger.debug("Token endpoint answered HTTP %s", response.status_code)

        try:
            return parse_token_response(response)
        except ProviderError as exc:
            logger.warning("Token endpoint rejected %s grant: %s", grant.grant_type, exc.error)
            raise

    # ------------------------------------------------------------------ #
    # Convenience operations
    # ------------------------------------------------------------------ #

    def get_app_access_token(
        self,
        scope: str = DEFAULT_APP_SCOPE,
        credentials: Optional[Credentials] = None,
    ) -> TokenResult:
        """Get an app access token with the client credentials grant.

        Args:
            scope: Space-delimited scopes; empty to request none.
            credentials: Per-call credentials override.
        """
        return self.exchange(ClientCredentialsGrant(scope=scope), credentials)

    def get_user_access_token(
        self,
        code: str,
        redirect_uri: str = DEFAULT_REDIRECT_URI,
        code_verifier: Optional[str] = None,
        credentials: Optional[Credentials] = None,
    ) -> TokenResult:
        """Exchange an authorization code for the first user access token.

        This is used once, after the user authorized the application in a
        browser. Later tokens should come from
        :meth:`refresh_user_access_token`.

        Args:
            code: The ``code`` query parameter from the redirect.
            redirect_uri: Must match the URI used in the authorization request.
            code_verifier: PKCE verifier, if a challenge was sent.
            credentials: Per-call credentials override.
        """
        grant = AuthorizationCodeGrant(
            code=code, redirect_uri=redirect_uri, code_verifier=code_verifier
        )
        return self.exchange(grant, credentials)

    def refresh_user_access_token(
        self,
        refresh_token: str,
        credentials: Optional[Credentials] = None,
    ) -> TokenResult:
        """Exchange a refresh token for a new user access token."""
        return self.exchange(RefreshTokenGrant(refresh_token=refresh_token), credentials)
