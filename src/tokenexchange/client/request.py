"""Token request construction -- turns a grant into a wire request.

:func:`build_token_request` is the pure half of an exchange: it validates
credentials and grant fields and produces a
:class:`~tokenexchange.models.TokenRequest` without touching the network.
Both :class:`~tokenexchange.client.sync_client.TokenExchangeClient` and
:class:`~tokenexchange.client.async_client.AsyncTokenExchangeClient` call it
before handing the request to their transport.
"""

from __future__ import annotations

from typing import Optional

from tokenexchange.exceptions import InvalidCredentials, InvalidGrant
from tokenexchange.models import Credentials, GrantRequest, TokenRequest


def resolve_credentials(
    call_credentials: Optional[Credentials],
    default_credentials: Optional[Credentials],
) -> Credentials:
    """Pick the per-call credentials over the client's.

    Raises:
        InvalidCredentials: If neither is set.
    """
    creds = call_credentials or default_credentials
    if creds is None:
        raise InvalidCredentials("No client credentials supplied")
    return creds


def build_token_request(
    token_url: str,
    credentials: Credentials,
    grant: GrantRequest,
) -> TokenRequest:
    """Serialize *grant* into a POST to *token_url*.

    The form always carries ``client_id``, ``client_secret`` and
    ``grant_type``, followed by the grant's own fields.

    Args:
        token_url: The provider's token endpoint.
        credentials: Client credentials; checked for empty fields.
        grant: Any member of :data:`~tokenexchange.models.GrantRequest`.

    Returns:
        The request to send.

    Raises:
        InvalidCredentials: If ``client_id`` or ``client_secret`` is empty.
        InvalidGrant: If the grant is missing a required field.
    """
    missing = credentials.missing_fields()
    if missing:
        raise InvalidCredentials(
            "Client credentials require non-empty " + " and ".join(missing)
        )

    errors = grant.validate_fields()
    if errors:
        raise InvalidGrant("; ".join(errors))

    form: dict[str, str] = {
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret.get_secret_value(),
    }
    form.update(grant.form_fields())
    return TokenRequest(url=token_url, form_fields=form)
