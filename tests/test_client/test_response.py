"""Tests for token response parsing."""

from __future__ import annotations

import json

import pytest

from tokenexchange.client.response import decode_body, extract_provider_error, parse_token_response
from tokenexchange.exceptions import MalformedResponse, ProviderError
from tokenexchange.models import TokenResult, TransportResponse


def _response(body: object, status_code: int = 200) -> TransportResponse:
    return TransportResponse(status_code=status_code, body=json.dumps(body).encode("utf-8"))


class TestDecodeBody:
    def test_object(self) -> None:
        assert decode_body(_response({"a": 1})) == {"a": 1}

    def test_empty_body(self) -> None:
        with pytest.raises(MalformedResponse, match="empty body"):
            decode_body(TransportResponse(status_code=200, body=b""))

    def test_not_json(self) -> None:
        with pytest.raises(MalformedResponse, match="non-JSON"):
            decode_body(TransportResponse(status_code=200, body=b"access_token=abc"))

    def test_invalid_utf8(self) -> None:
        with pytest.raises(MalformedResponse):
            decode_body(TransportResponse(status_code=200, body=b"\xff\xfe\xfa"))

    @pytest.mark.parametrize("body", [[1, 2], "token", 42, None])
    def test_json_but_not_object(self, body: object) -> None:
        with pytest.raises(MalformedResponse, match="expected an object"):
            decode_body(_response(body))


class TestExtractProviderError:
    def test_success_without_error(self) -> None:
        assert extract_provider_error(200, {"access_token": "x"}) is None

    def test_oauth2_error(self) -> None:
        err = extract_provider_error(
            400, {"error": "invalid_grant", "error_description": "Code expired"}
        )
        assert isinstance(err, ProviderError)
        assert err.error == "invalid_grant"
        assert err.description == "Code expired"
        assert "invalid_grant" in str(err)
        assert "Code expired" in str(err)

    def test_twitch_style_error(self) -> None:
        err = extract_provider_error(400, {"status": 400, "message": "Invalid refresh token"})
        assert err is not None
        assert err.error == "http_400"
        assert err.description == "Invalid refresh token"

    def test_error_field_on_2xx(self) -> None:
        err = extract_provider_error(200, {"error": "access_denied"})
        assert err is not None
        assert err.status_code == 200


class TestParseTokenResponse:
    def test_minimal_body(self) -> None:
        result = parse_token_response(
            _response({"access_token": "abc", "token_type": "bearer", "expires_in": 3600})
        )
        assert result == TokenResult(access_token="abc", token_type="bearer", expires_in=3600)

    def test_token_type_defaults_to_bearer(self) -> None:
        result = parse_token_response(_response({"access_token": "abc"}))
        assert result.token_type == "bearer"
        assert result.expires_in is None

    def test_space_delimited_scope(self) -> None:
        result = parse_token_response(_response({"access_token": "a", "scope": "read write"}))
        assert result.scope == ["read", "write"]

    def test_list_scope(self) -> None:
        result = parse_token_response(_response({"access_token": "a", "scope": ["chat:read"]}))
        assert result.scope == ["chat:read"]

    def test_invalid_scope(self) -> None:
        with pytest.raises(MalformedResponse, match="scope"):
            parse_token_response(_response({"access_token": "a", "scope": [1, 2]}))

    def test_numeric_string_expires_in(self) -> None:
        result = parse_token_response(_response({"access_token": "a", "expires_in": "120"}))
        assert result.expires_in == 120

    @pytest.mark.parametrize("value", ["soon", True, 1.5, {"s": 1}, "\u00b2", "-5"])
    def test_invalid_expires_in(self, value: object) -> None:
        with pytest.raises(MalformedResponse, match="expires_in"):
            parse_token_response(_response({"access_token": "a", "expires_in": value}))

    @pytest.mark.parametrize("body", [{}, {"access_token": ""}, {"access_token": 12}])
    def test_unusable_access_token(self, body: dict) -> None:
        with pytest.raises(MalformedResponse, match="access_token"):
            parse_token_response(_response(body))

    def test_invalid_refresh_token(self) -> None:
        with pytest.raises(MalformedResponse, match="refresh_token"):
            parse_token_response(_response({"access_token": "a", "refresh_token": 5}))

    def test_error_status_wins_over_token_fields(self) -> None:
        with pytest.raises(ProviderError):
            parse_token_response(_response({"access_token": "a"}, status_code=401))

    def test_non_json_error_status_is_malformed(self) -> None:
        with pytest.raises(MalformedResponse) as exc_info:
            parse_token_response(TransportResponse(status_code=503, body=b"Service Unavailable"))
        assert exc_info.value.status_code == 503
