"""Exception hierarchy for tokenexchange.

All exceptions inherit from :class:`TokenExchangeError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`tokenexchange.exit_codes`. The CLI entry point in
:func:`tokenexchange.app.main` catches ``TokenExchangeError`` and exits with
the appropriate code.

The five token-exchange failure kinds share the :class:`TokenError` base so
library callers can catch every outcome of
:meth:`~tokenexchange.client.TokenExchangeClient.exchange` in one clause.

Subclass hierarchy::

    TokenExchangeError (exit 1)
    +-- ConfigError             (exit 1)
    +-- TokenError              (exit 1)
        +-- InvalidCredentials  (exit 2)
        +-- InvalidGrant        (exit 2)
        +-- ProviderError       (exit 3)
        +-- MalformedResponse   (exit 5)
        +-- TransportError      (exit 6)
"""

from __future__ import annotations

from typing import Optional

from tokenexchange.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_RESPONSE,
    EXIT_PROVIDER_ERROR,
)


class TokenExchangeError(Exception):
    """Base exception for all tokenexchange errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`tokenexchange.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(TokenExchangeError):
    """Raised for configuration problems (bad env values, unreadable credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class TokenError(TokenExchangeError):
    """Base class for every failure of a single token exchange."""


class InvalidCredentials(TokenError):
    """Raised when ``client_id`` or ``client_secret`` is missing or empty.

    Detected before any request is built, so no HTTP call is issued.
    """

    exit_code = EXIT_INVALID_USAGE


class InvalidGrant(TokenError):
    """Raised when a grant is missing a field its variant requires.

    Detected before any request is built, so no HTTP call is issued.
    """

    exit_code = EXIT_INVALID_USAGE


class TransportError(TokenError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    The underlying exception is available both as ``cause`` and as
    ``__cause__`` when raised with ``raise ... from``.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class MalformedResponse(TokenError):
    """Raised when the token endpoint body is not JSON or lacks required fields."""

    exit_code = EXIT_MALFORMED_RESPONSE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProviderError(TokenError):
    """Raised when the token endpoint rejects the request.

    Covers both non-2xx responses and 2xx responses whose body carries an
    ``error`` field.

    Args:
        status_code: HTTP status returned by the provider.
        error: The provider's error code (e.g. ``invalid_grant``).
        description: Optional human-readable detail from the provider.
    """

    exit_code = EXIT_PROVIDER_ERROR

    def __init__(
        self,
        status_code: int,
        error: str,
        description: Optional[str] = None,
    ):
        message = f"Token endpoint returned {status_code}: {error}"
        if description:
            message = f"{message} ({description})"
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.description = description
