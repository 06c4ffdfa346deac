"""Asynchronous token exchange client -- mirrors :class:`~tokenexchange.client.sync_client.TokenExchangeClient`.

This module provides :class:`AsyncTokenExchangeClient`, the non-blocking
counterpart of :class:`~tokenexchange.client.sync_client.TokenExchangeClient`.
It shares request building and response parsing with the blocking client and
only differs in awaiting the transport, which is the single suspension point
of a call.

If the awaiting task is cancelled, :class:`asyncio.CancelledError`
propagates out of :meth:`~AsyncTokenExchangeClient.exchange` and no token
result is produced.
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
from tokenexchange.transport import AsyncHttpxTransport, AsyncTransport

logger = logging.getLogger(__name__)


class AsyncTokenExchangeClient:
    """Non-blocking client for an OAuth2 token endpoint.

    Takes the same arguments as
    :class:`~tokenexchange.client.sync_client.TokenExchangeClient`, with an
    :class:`~tokenexchange.transport.AsyncTransport` in place of the blocking
    one. Use as an async context manager to close a transport it created.

    Example::

        async with AsyncTokenExchangeClient(credentials=creds) as client:
            token = await client.refresh_user_access_token(refresh_token)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        credentials: Optional[Credentials] = None,
        transport: Optional[AsyncTransport] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._credentials = credentials
        self._owned_transport: Optional[AsyncHttpxTransport] = None
        if transport is None:
            self._owned_transport = AsyncHttpxTransport(self._config)
            transport = self._owned_transport
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> AsyncTokenExchangeClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.aclose()
            self._owned_transport = None

    async def exchange(
        self,
        grant: GrantRequest,
        credentials: Optional[Credentials] = None,
    ) -> TokenResult:
        """Exchange *grant* for a token.

        See :meth:`TokenExchangeClient.exchange
        <tokenexchange.client.sync_client.TokenExchangeClient.exchange>`
        for arguments and the errors raised.
        """
        creds = resolve_credentials(credentials, self._credentials)
        request = build_token_request(self._config.token_url, creds, grant)

        logger.debug("Requesting %s token from %s", grant.grant_type, request.url)
        try:
            response = await self._transport.send(request)
        except OSError as exc:
            logger.warning("Token request to %s failed: %s", request.url, exc)
            raise TransportError(f"Token request failed: {exc}", cause=exc) from exc
        logger.debug("Token endpoint answered HTTP %s", response.status_code)

        try:
            return parse_token_response(response)
        except ProviderError as exc:
            logger.warning("Token endpoint rejected %s grant: %s", grant.grant_type, exc.error)
            raise

    async def get_app_access_token(
        self,
        scope: str = DEFAULT_APP_SCOPE,
        credentials: Optional[Credentials] = None,
    ) -> TokenResult:
        return await self.exchange(ClientCredentialsGrant(scope=scope), credentials)

    async def get_user_access_token(
        self,
        code: str,
        redirect_uri: str = DEFAULT_REDIRECT_URI,
        code_verifier: Optional[str] = None,
        credentials: Optional[Credentials] = None,
    ) -> TokenResult:
        grant = AuthorizationCodeGrant(
            code=code, redirect_uri=redirect_uri, code_verifier=code_verifier
        )
        return await self.exchange(grant, credentials)

    async def refresh_user_access_token(
        self,
        refresh_token: str,
        credentials: Optional[Credentials] = None,
    ) -> TokenResult:
        return await self.exchange(RefreshTokenGrant(refresh_token=refresh_token), credentials)
