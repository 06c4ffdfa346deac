"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tokenexchange.exceptions.TokenExchangeError` subclass.
Shell wrappers can inspect the exit code to tell a rejected grant from a
network failure without parsing stderr.

Example::

    $ tokenexchange refresh "$REFRESH_TOKEN"
    $ echo $?
    3   # EXIT_PROVIDER_ERROR -- the token endpoint rejected the grant
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Credentials or grant fields were missing or empty."""

EXIT_PROVIDER_ERROR = 3
"""The token endpoint answered with an OAuth2 error."""

EXIT_MALFORMED_RESPONSE = 5
"""The token endpoint answered with a body that is not a usable token response."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
