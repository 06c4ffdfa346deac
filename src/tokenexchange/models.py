"""Canonical Pydantic models shared across all tokenexchange modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Inputs** -- supplied by the caller:
    :class:`Credentials`, :class:`ClientCredentialsGrant`,
    :class:`AuthorizationCodeGrant`, :class:`RefreshTokenGrant` (together the
    :data:`GrantRequest` union), and :class:`ClientConfig`.

**Wire models** -- exchanged with the transport:
    :class:`TokenRequest` and :class:`TransportResponse`.

**Output** -- returned to the caller:
    :class:`TokenResult`.

Every model is frozen. Fields holding secrets are either :class:`SecretStr`
or excluded from ``repr`` so that they never end up in logs or tracebacks.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_TOKEN_URL = "https://id.twitch.tv/oauth2/token"
DEFAULT_AUTHORIZE_URL = "https://id.twitch.tv/oauth2/authorize"
DEFAULT_APP_SCOPE = "chat_login"
DEFAULT_REDIRECT_URI = "http://localhost"


# --- Credentials ---


class Credentials(BaseModel):
    """OAuth2 client credentials issued by the provider.

    Empty values are accepted here and rejected by the client with
    :class:`~tokenexchange.exceptions.InvalidCredentials`, so that the
    failure is reported the same way no matter how the model was built.

    Example::

        creds = Credentials(client_id="abc", client_secret="s3cret")
        creds.client_secret.get_secret_value()  # "s3cret"
    """

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: SecretStr

    def missing_fields(self) -> list[str]:
        """Return the names of fields that are empty or whitespace-only."""
        missing: list[str] = []
        if not self.client_id.strip():
            missing.append("client_id")
        if not self.client_secret.get_secret_value().strip():
            missing.append("client_secret")
        return missing


# --- Grants ---


class _Grant(BaseModel):
    """Shared base of the grant variants. Subclasses implement :meth:`form_fields`."""

    model_config = ConfigDict(frozen=True)

    def validate_fields(self) -> list[str]:
        """Validate variant-specific fields.

        Returns:
            A list of human-readable error strings. Empty if valid.
        """
        return []

    @abstractmethod
    def form_fields(self) -> dict[str, str]:
        """Return the grant's form parameters, including ``grant_type``."""


class ClientCredentialsGrant(_Grant):
    """App access token request (:rfc:`6749` section 4.4).

    An empty ``scope`` is left out of the request entirely.
    """

    grant_type: Literal["client_credentials"] = "client_credentials"
    scope: str = ""

    def form_fields(self) -> dict[str, str]:
        fields = {"grant_type": self.grant_type}
        if self.scope.strip():
            fields["scope"] = self.scope
        return fields


class AuthorizationCodeGrant(_Grant):
    """Initial user access token request (:rfc:`6749` section 4.1.3).

    Used once, after the user has authorized the application in a browser
    and the provider redirected back with ``code``. Later tokens should come
    from a :class:`RefreshTokenGrant`.
    """

    grant_type: Literal["authorization_code"] = "authorization_code"
    code: str = Field(repr=False)
    redirect_uri: str
    code_verifier: Optional[str] = Field(default=None, repr=False)

    def validate_fields(self) -> list[str]:
        errors: list[str] = []
        if not self.code.strip():
            errors.append("authorization_code grant requires a non-empty 'code'")
        if not self.redirect_uri.strip():
            errors.append("authorization_code grant requires a non-empty 'redirect_uri'")
        if self.code_verifier is not None and not self.code_verifier.strip():
            errors.append("authorization_code grant 'code_verifier' must not be empty when set")
        return errors

    def form_fields(self) -> dict[str, str]:
        fields = {
            "grant_type": self.grant_type,
            "code": self.code,
            "redirect_uri": self.redirect_uri,
        }
        if self.code_verifier:
            fields["code_verifier"] = self.code_verifier
        return fields


class RefreshTokenGrant(_Grant):
    """Refresh token exchange (:rfc:`6749` section 6)."""

    grant_type: Literal["refresh_token"] = "refresh_token"
    refresh_token: str = Field(repr=False)

    def validate_fields(self) -> list[str]:
        if not self.refresh_token.strip():
            return ["refresh_token grant requires a non-empty 'refresh_token'"]
        return []

    def form_fields(self) -> dict[str, str]:
        return {"grant_type": self.grant_type, "refresh_token": self.refresh_token}


GrantRequest = Annotated[
    Union[ClientCredentialsGrant, AuthorizationCodeGrant, RefreshTokenGrant],
    Field(discriminator="grant_type"),
]
"""Tagged union over the three supported grants, discriminated on ``grant_type``."""


# --- Wire models ---


class TokenRequest(BaseModel):
    """A fully built token endpoint request, ready for a transport.

    ``form_fields`` carries the client secret and is therefore hidden from
    ``repr``.
    """

    model_config = ConfigDict(frozen=True)

    method: Literal["POST"] = "POST"
    url: str
    form_fields: dict[str, str] = Field(repr=False)


class TransportResponse(BaseModel):
    """Raw status and body returned by a transport."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: bytes = b""


# --- Output ---


class TokenResult(BaseModel):
    """Parsed token endpoint response.

    Ownership passes entirely to the caller; clients keep no reference.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = Field(default=None, repr=False)
    scope: Optional[list[str]] = None


# --- Client configuration ---


class ClientConfig(BaseModel):
    """Endpoint and HTTP settings for a token exchange client.

    Built by :func:`~tokenexchange.config.load_client_config`, or directly by
    library callers. Defaults point at the Twitch identity endpoints.
    """

    model_config = ConfigDict(frozen=True)

    token_url: str = Field(default=DEFAULT_TOKEN_URL, description="OAuth2 token endpoint")
    authorize_url: str = Field(
        default=DEFAULT_AUTHORIZE_URL, description="OAuth2 authorization endpoint"
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
