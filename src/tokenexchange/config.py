"""Configuration and credential resolution for the CLI and other callers.

The token exchange core never reads the environment. This module is the
caller-side layer that does:

* **Client config** -- :func:`load_client_config` builds a
  :class:`~tokenexchange.models.ClientConfig` with the precedence
  explicit argument > ``TOKENEXCHANGE_*`` environment variable > default.
* **Credential resolution** -- :func:`resolve_credential` reads a secret
  from an env var, a file, or an interactive prompt, and
  :func:`load_credentials` combines two sources into
  :class:`~tokenexchange.models.Credentials`.
"""

from __future__ import annotations

import getpass
import os
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from tokenexchange.exceptions import ConfigError
from tokenexchange.models import ClientConfig, Credentials

ENV_TOKEN_URL = "TOKENEXCHANGE_TOKEN_URL"
ENV_AUTHORIZE_URL = "TOKENEXCHANGE_AUTHORIZE_URL"
ENV_TIMEOUT = "TOKENEXCHANGE_TIMEOUT"
ENV_VERIFY_SSL = "TOKENEXCHANGE_VERIFY_SSL"
ENV_CLIENT_ID = "TOKENEXCHANGE_CLIENT_ID"
ENV_CLIENT_SECRET = "TOKENEXCHANGE_CLIENT_SECRET"

DEFAULT_CLIENT_ID_SOURCE = f"env:{ENV_CLIENT_ID}"
DEFAULT_CLIENT_SECRET_SOURCE = f"env:{ENV_CLIENT_SECRET}"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# --- Client config ---


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable '{name}' must be a boolean, got {value!r}")


def load_client_config(
    token_url: Optional[str] = None,
    authorize_url: Optional[str] = None,
    timeout: Optional[float] = None,
    verify_ssl: Optional[bool] = None,
) -> ClientConfig:
    """Resolve the effective client configuration.

    Each setting is taken from the first of:

    1. the explicit argument (e.g. a CLI flag),
    2. its ``TOKENEXCHANGE_*`` environment variable,
    3. the :class:`~tokenexchange.models.ClientConfig` default.

    Returns:
        The resolved :class:`~tokenexchange.models.ClientConfig`.

    Raises:
        ConfigError: If an environment value cannot be parsed or the
            resulting configuration is invalid.
    """
    values: dict[str, Any] = {}

    env_token_url = os.environ.get(ENV_TOKEN_URL)
    if token_url is not None:
        values["token_url"] = token_url
    elif env_token_url:
        values["token_url"] = env_token_url

    env_authorize_url = os.environ.get(ENV_AUTHORIZE_URL)
    if authorize_url is not None:
        values["authorize_url"] = authorize_url
    elif env_authorize_url:
        values["authorize_url"] = env_authorize_url

    env_timeout = os.environ.get(ENV_TIMEOUT)
    if timeout is not None:
        values["timeout"] = timeout
    elif env_timeout:
        try:
            values["timeout"] = float(env_timeout)
        except ValueError as exc:
            raise ConfigError(
                f"Environment variable '{ENV_TIMEOUT}' must be a number, got {env_timeout!r}"
            ) from exc

    env_verify = os.environ.get(ENV_VERIFY_SSL)
    if verify_ssl is not None:
        values["verify_ssl"] = verify_ssl
    elif env_verify:
        values["verify_ssl"] = _parse_bool(ENV_VERIFY_SSL, env_verify)

    try:
        return ClientConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Args:
        source: The source descriptor string.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        file_path = source[5:]
        path = Path(file_path).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter credential: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def load_credentials(
    client_id_source: str = DEFAULT_CLIENT_ID_SOURCE,
    client_secret_source: str = DEFAULT_CLIENT_SECRET_SOURCE,
) -> Credentials:
    """Resolve both halves of the client credentials.

    Empty values are passed through; the client rejects them with
    :class:`~tokenexchange.exceptions.InvalidCredentials`.

    Raises:
        ConfigError: If either source can't be resolved.
    """
    return Credentials(
        client_id=resolve_credential(client_id_source),
        client_secret=resolve_credential(client_secret_source),
    )
