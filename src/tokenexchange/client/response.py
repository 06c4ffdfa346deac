"""Token response parsing -- maps a raw transport response to a result or error.

:func:`parse_token_response` applies the checks in a fixed order:

1. The body must decode as a JSON object, else
   :class:`~tokenexchange.exceptions.MalformedResponse`.
2. A non-2xx status or an ``error`` member means
   :class:`~tokenexchange.exceptions.ProviderError`.
3. ``access_token`` must be a non-empty string and ``expires_in``, when
   present, an integer, else :class:`~tokenexchange.exceptions.MalformedResponse`.

A body that fails any check never becomes a
:class:`~tokenexchange.models.TokenResult`.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from tokenexchange.exceptions import MalformedResponse, ProviderError
from tokenexchange.models import TokenResult, TransportResponse


def decode_body(response: TransportResponse) -> dict[str, Any]:
    """Decode the response body as a JSON object.

    Raises:
        MalformedResponse: If the body is empty, not JSON, or not an object.
    """
    status = response.status_code
    if not response.body:
        raise MalformedResponse(f"Token endpoint returned an empty body (HTTP {status})", status)
    try:
        data = json.loads(response.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedResponse(
            f"Token endpoint returned a non-JSON body (HTTP {status}): {exc}", status
        ) from exc
    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Token endpoint returned JSON {type(data).__name__}, expected an object "
            f"(HTTP {status})",
            status,
        )
    return data


def extract_provider_error(status_code: int, data: dict[str, Any]) -> Optional[ProviderError]:
    """Return a :class:`ProviderError` if the response signals failure, else ``None``.

    Standard OAuth2 errors carry ``error`` and ``error_description``. Some
    providers (Twitch among them) answer with ``status`` and ``message``
    instead, so ``message`` is used as the description when present.
    """
    error = data.get("error")
    if status_code < 200 or status_code >= 300 or error:
        code = str(error) if error else f"http_{status_code}"
        description = data.get("error_description") or data.get("message")
        return ProviderError(status_code, code, str(description) if description else None)
    return None


def _parse_expires_in(value: Any, status_code: int) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise MalformedResponse(f"Invalid 'expires_in' value: {value!r}", status_code)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        digits = value.strip()
        # isdigit() is also true for superscripts, which int() rejects
        if digits.isascii() and digits.isdigit():
            return int(digits)
    raise MalformedResponse(f"Invalid 'expires_in' value: {value!r}", status_code)


def _parse_scope(value: Any, status_code: int) -> Optional[list[str]]:
    # RFC 6749 uses a space-delimited string; Twitch returns a JSON array.
    if value is None:
        return None
    if isinstance(value, str):
        return value.split()
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise MalformedResponse(f"Invalid 'scope' value: {value!r}", status_code)


def parse_token_response(response: TransportResponse) -> TokenResult:
    """Turn a raw token endpoint response into a :class:`TokenResult`.

    Args:
        response: Status and body as returned by the transport.

    Returns:
        The parsed token.

    Raises:
        MalformedResponse: If the body is not a JSON object or a mandatory
            field is missing or mistyped.
        ProviderError: If the status is not 2xx or the body has an ``error``.
    """
    status = response.status_code
    data = decode_body(response)

    provider_error = extract_provider_error(status, data)
    if provider_error is not None:
        raise provider_error

    access_token = data.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        raise MalformedResponse("Token response missing 'access_token' field", status)

    token_type = data.get("token_type") or "bearer"
    refresh_token = data.get("refresh_token")
    if refresh_token is not None and not isinstance(refresh_token, str):
        raise MalformedResponse("Invalid 'refresh_token' value", status)

    return TokenResult(
        access_token=access_token,
        token_type=str(token_type),
        expires_in=_parse_expires_in(data.get("expires_in"), status),
        refresh_token=refresh_token or None,
        scope=_parse_scope(data.get("scope"), status),
    )
