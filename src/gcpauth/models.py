"""Pydantic models for credential material and access tokens.

All models are frozen: a credential source is resolved once and never
mutated, and a cached token is replaced wholesale on every refresh.

Secret-bearing fields are declared with ``repr=False`` so that printing or
logging a model never reveals key material.
"""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator


class GcpAuthBaseModel(BaseModel):
    """Base model for gcpauth entities.

    - **Immutability**: Models are frozen after creation
    - **Strict validation**: Extra fields are forbidden
    - **Flexible naming**: Fields can be populated by name or alias
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        validate_default=True,
    )


class _ExternalDocument(GcpAuthBaseModel):
    """Base for documents produced by Google tooling; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class ServiceAccountCredentials(_ExternalDocument):
    """Service-account key file as downloaded from the Cloud console."""

    type: str = Field(..., description="Credential type, 'service_account'")
    project_id: str = Field(..., description="Project owning the service account")
    private_key_id: str = Field(..., description="Key identifier used as the JWT kid")
    private_key: str = Field(..., repr=False, description="PEM encoded RSA private key")
    client_email: str = Field(..., description="Service-account email, JWT iss and sub")
    client_id: str = Field(..., description="Numeric client id")
    auth_uri: str = Field(..., description="OAuth authorization endpoint")
    token_uri: str = Field(..., description="OAuth token endpoint the assertion is posted to")
    auth_provider_x509_cert_url: str = Field(..., description="Provider certificate URL")
    client_x509_cert_url: str = Field(..., description="Service-account certificate URL")

    @field_validator("token_uri")
    @classmethod
    def validate_token_uri(cls, v: str) -> str:
        """Validate that the token endpoint is an absolute http(s) URL."""
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid token_uri: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("token_uri must be an absolute http(s) URL")
        return v


class DelegatedUserCredentials(_ExternalDocument):
    """User credentials written by ``gcloud auth application-default login``."""

    client_id: str = Field(..., description="OAuth client id")
    client_secret: str = Field(..., repr=False, description="OAuth client secret")
    refresh_token: str = Field(..., repr=False, description="Long-lived refresh token")
    quota_project_id: str | None = Field(
        default=None, description="Project billed for quota, sent as x-goog-user-project"
    )
    type: str | None = Field(default=None, description="Credential type, 'authorized_user'")


class MetadataServerCredentials(GcpAuthBaseModel):
    """Marker for tokens served by the local metadata server; holds no secrets."""

    base_url: str = Field(..., description="Metadata server base URL")


CredentialSource = ServiceAccountCredentials | DelegatedUserCredentials | MetadataServerCredentials


class AccessToken(GcpAuthBaseModel):
    """A bearer token together with its natural expiry.

    Attributes:
        value: The bearer token string (opaque token or signed JWT).
        expires_at: Unix timestamp when the token stops being accepted.
        token_type: Token type for the Authorization header.
    """

    value: str = Field(..., repr=False, description="The bearer token string")
    expires_at: float = Field(..., description="Unix timestamp when the token expires")
    token_type: str = Field(default="Bearer", description="Token type for Authorization header")

    def is_expired(self, now: float, skew: float = 0) -> bool:
        """Return True once ``now`` reaches ``skew`` seconds before expiry."""
        return now >= self.expires_at - skew


class TokenResponse(_ExternalDocument):
    """Successful response of the OAuth token endpoint or the metadata server."""

    access_token: str = Field(..., repr=False)
    expires_in: int = Field(..., description="Lifetime in seconds from now")
    token_type: str = Field(default="Bearer")


class OAuthErrorResponse(_ExternalDocument):
    """Error body returned by the OAuth token endpoint (RFC 6749 section 5.2)."""

    error: str
    error_description: str | None = None

    def describe(self) -> str:
        if self.error_description:
            return f"{self.error}: {self.error_description}"
        return self.error
