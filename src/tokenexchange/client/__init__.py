"""Token exchange clients for tokenexchange.

Provides synchronous and asynchronous clients that turn an OAuth2 grant into
a token by way of a single POST to the provider's token endpoint.

Classes:
    :class:`TokenExchangeClient` -- blocking client over a
    :class:`~tokenexchange.transport.Transport`.
    :class:`AsyncTokenExchangeClient` -- non-blocking client over an
    :class:`~tokenexchange.transport.AsyncTransport`.

Example::

    from tokenexchange.client import TokenExchangeClient

    with TokenExchangeClient(credentials=creds) as client:
        token = client.get_user_access_token(code)
"""

from tokenexchange.client.async_client import AsyncTokenExchangeClient
from tokenexchange.client.request import build_token_request
from tokenexchange.client.response import parse_token_response
from tokenexchange.client.sync_client import TokenExchangeClient

__all__ = [
    "TokenExchangeClient",
    "AsyncTokenExchangeClient",
    "build_token_request",
    "parse_token_response",
]
