"""HTTP transports consumed by the token exchange clients.

The clients only need one capability: send a :class:`~tokenexchange.models.TokenRequest`
and get back a status code and body. :class:`Transport` and
:class:`AsyncTransport` describe that capability as structural protocols, so
any object with a matching ``send`` method can be injected (a test double, a
transport with its own retry policy, a different HTTP library).

The bundled implementations wrap :mod:`httpx`:

- :class:`HttpxTransport` -- blocking, backed by :class:`httpx.Client`.
- :class:`AsyncHttpxTransport` -- non-blocking, backed by :class:`httpx.AsyncClient`.

Both post ``application/x-www-form-urlencoded`` bodies and convert every
:class:`httpx.HTTPError` into :class:`~tokenexchange.exceptions.TransportError`.
HTTP error statuses are *not* errors at this layer; classifying them is the
client's job.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

import httpx

from tokenexchange.exceptions import TransportError
from tokenexchange.models import ClientConfig, TokenRequest, TransportResponse

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {"Accept": "application/json"}


@runtime_checkable
class Transport(Protocol):
    """Blocking transport: one request in, one response out."""

    def send(self, request: TokenRequest) -> TransportResponse:
        """Send *request* and return the raw response.

        Raises:
            TransportError: On connection, timeout, or other I/O failure.
        """
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Non-blocking counterpart of :class:`Transport`."""

    async def send(self, request: TokenRequest) -> TransportResponse:
        ...


class HttpxTransport:
    """:class:`Transport` backed by :class:`httpx.Client`.

    Args:
        config: Supplies timeout and SSL verification settings.
        client: Optional pre-built client (e.g. with an
            :class:`httpx.MockTransport` in tests). When given, the caller
            owns it and :meth:`close` leaves it open.

    Example::

        with HttpxTransport(ClientConfig()) as transport:
            response = transport.send(request)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        config = config or ClientConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=False,
        )

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def send(self, request: TokenRequest) -> TransportResponse:
        try:
            response = self._client.request(
                request.method,
                request.url,
                data=request.form_fields,
                headers=_DEFAULT_HEADERS,
            )
        except httpx.HTTPError as exc:
            logger.warning("Token request to %s failed: %s", request.url, exc)
            raise TransportError(f"Token request failed: {exc}", cause=exc) from exc
        return TransportResponse(status_code=response.status_code, body=response.content)


class AsyncHttpxTransport:
    """:class:`AsyncTransport` backed by :class:`httpx.AsyncClient`.

    Mirrors :class:`HttpxTransport`; use as an async context manager.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        config = config or ClientConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=False,
        )

    async def __aenter__(self) -> AsyncHttpxTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, request: TokenRequest) -> TransportResponse:
        try:
            response = await self._client.request(
                request.method,
                request.url,
                data=request.form_fields,
                headers=_DEFAULT_HEADERS,
            )
        except httpx.HTTPError as exc:
            logger.warning("Token request to %s failed: %s", request.url, exc)
            raise TransportError(f"Token request failed: {exc}", cause=exc) from exc
        return TransportResponse(status_code=response.status_code, body=response.content)
