"""Tests for token request construction."""

from __future__ import annotations

import pytest

from tokenexchange.client.request import build_token_request, resolve_credentials
from tokenexchange.exceptions import InvalidCredentials, InvalidGrant
from tokenexchange.models import (
    AuthorizationCodeGrant,
    ClientCredentialsGrant,
    Credentials,
    RefreshTokenGrant,
)

URL = "https://auth.example.com/token"


class TestBuildTokenRequest:
    def test_client_credentials(self, credentials) -> None:
        request = build_token_request(URL, credentials, ClientCredentialsGrant(scope="a b"))

        assert request.method == "POST"
        assert request.url == URL
        assert request.form_fields["grant_type"] == "client_credentials"
        assert request.form_fields["scope"] == "a b"

    def test_deterministic(self, credentials) -> None:
        grant = AuthorizationCodeGrant(code="c", redirect_uri="http://localhost")

        assert build_token_request(URL, credentials, grant) == build_token_request(
            URL, credentials, grant
        )

    def test_authorization_code_with_verifier(self, credentials) -> None:
        grant = AuthorizationCodeGrant(code="c", redirect_uri="http://localhost", code_verifier="v")

        fields = build_token_request(URL, credentials, grant).form_fields

        assert fields["code_verifier"] == "v"

    def test_blank_code_verifier_rejected(self, credentials) -> None:
        grant = AuthorizationCodeGrant(code="c", redirect_uri="http://localhost", code_verifier=" ")

        with pytest.raises(InvalidGrant, match="code_verifier"):
            build_token_request(URL, credentials, grant)

    def test_grant_fields_cannot_override_credentials(self, credentials) -> None:
        fields = build_token_request(URL, credentials, RefreshTokenGrant(refresh_token="r")).form_fields

        assert set(fields) == {"client_id", "client_secret", "grant_type", "refresh_token"}

    def test_reports_every_missing_credential(self) -> None:
        creds = Credentials(client_id="", client_secret="")

        with pytest.raises(InvalidCredentials, match="client_id and client_secret"):
            build_token_request(URL, creds, ClientCredentialsGrant())


class TestResolveCredentials:
    def test_call_credentials_win(self, credentials) -> None:
        other = Credentials(client_id="x", client_secret="y")
        assert resolve_credentials(other, credentials) is other

    def test_falls_back_to_default(self, credentials) -> None:
        assert resolve_credentials(None, credentials) is credentials

    def test_neither_set(self) -> None:
        with pytest.raises(InvalidCredentials):
            resolve_credentials(None, None)
