"""Shared test fixtures for tokenexchange.

Provides credentials, recording fake transports for the sync and async
clients, environment isolation, and a CLI runner. These fixtures are
discovered by pytest and available to all test modules without imports.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import pytest

from tokenexchange.exceptions import TransportError
from tokenexchange.models import ClientConfig, Credentials, TokenRequest, TransportResponse
from tokenexchange.output import OutputFormat, OutputManager, reset_output, set_output


TOKEN_URL = "https://auth.example.com/oauth2/token"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams the
    cached references go stale once the test ends.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake transports
# ---------------------------------------------------------------------------


class RecordingTransport:
    """Transport double that records requests and replays a canned outcome."""

    def __init__(self) -> None:
        self.requests: list[TokenRequest] = []
        self._response = TransportResponse(status_code=200, body=b"{}")
        self._error: Optional[Exception] = None

    def respond(self, body: Any = None, status_code: int = 200, raw: Optional[bytes] = None) -> None:
        payload = raw if raw is not None else json.dumps(body).encode("utf-8")
        self._response = TransportResponse(status_code=status_code, body=payload)
        self._error = None

    def fail(self, error: Exception) -> None:
        self._error = error

    def send(self, request: TokenRequest) -> TransportResponse:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._response


class AsyncRecordingTransport(RecordingTransport):
    """Async flavour of :class:`RecordingTransport`."""

    async def send(self, request: TokenRequest) -> TransportResponse:  # type: ignore[override]
        return RecordingTransport.send(self, request)


@pytest.fixture
def transport() -> RecordingTransport:
    """A fake transport answering with a minimal successful token body."""
    fake = RecordingTransport()
    fake.respond(token_body())
    return fake


@pytest.fixture
def async_transport() -> AsyncRecordingTransport:
    fake = AsyncRecordingTransport()
    fake.respond(token_body())
    return fake


@pytest.fixture
def connection_refused() -> TransportError:
    import httpx

    cause = httpx.ConnectError("Connection refused")
    return TransportError(f"Token request failed: {cause}", cause=cause)


def token_body(**overrides: Any) -> dict[str, Any]:
    """Build a token endpoint JSON body with sensible defaults."""
    body: dict[str, Any] = {
        "access_token": "abc",
        "token_type": "bearer",
        "expires_in": 3600,
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_token_body():
    return token_body


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(client_id="my-client-id", client_secret="my-client-secret")


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(token_url=TOKEN_URL)


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Clear every TOKENEXCHANGE_* variable that might leak into tests."""
    for var in [
        "TOKENEXCHANGE_TOKEN_URL",
        "TOKENEXCHANGE_AUTHORIZE_URL",
        "TOKENEXCHANGE_TIMEOUT",
        "TOKENEXCHANGE_VERIFY_SSL",
        "TOKENEXCHANGE_CLIENT_ID",
        "TOKENEXCHANGE_CLIENT_SECRET",
    ]:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
