"""Service-account token provider.

The scope list picks the protocol once, at construction:

- empty scopes: a self-signed JWT whose audience is the target API is the
  bearer token itself; no network round trip is made.
- non-empty scopes: a signed assertion is exchanged at the OAuth token
  endpoint for an access token (JWT bearer grant, RFC 7523).
"""

from __future__ import annotations

import time
from typing import Callable, Iterable

import httpx
from joserfc import jwk

from gcpauth.models import AccessToken, ServiceAccountCredentials
from gcpauth.observability import get_logger
from gcpauth.providers.base import AccessTokenProvider
from gcpauth.providers.http import fetch_token_response, to_access_token
from gcpauth.providers.jwt import (
    JWT_BEARER_GRANT_TYPE,
    JWT_LIFETIME_SECONDS,
    OAUTH_TOKEN_AUDIENCE,
    build_claims,
    import_signing_key,
    sign_jwt,
)
from gcpauth.scopes import normalize_scopes

logger = get_logger(__name__)


class ServiceAccountCredentialsProvider(AccessTokenProvider):
    """Token provider for service-account key files.

    Example:
        >>> provider = ServiceAccountCredentialsProvider(
        ...     credentials,
        ...     scopes=[],
        ...     audience="https://storage.googleapis.com/",
        ... )
        >>> token = await provider.get_access_token()  # self-signed JWT
    """

    name = "service_account"
    refresh_skew = 300.0

    def __init__(
        self,
        credentials: ServiceAccountCredentials,
        scopes: Iterable[str] | None = None,
        *,
        audience: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the provider.

        Args:
            credentials: Parsed service-account key.
            scopes: OAuth scopes; empty selects self-signed JWT mode.
            audience: Target API base URL, required in self-signed mode.
            transport: Optional httpx transport for testing.
            clock: Returns the current Unix time.

        Raises:
            ValueError: No scopes and no audience were given.
        """
        super().__init__(clock=clock)
        self._credentials = credentials
        self._scopes = normalize_scopes(scopes)
        if not self._scopes and not audience:
            raise ValueError("audience is required for self-signed JWTs (no scopes given)")
        self._audience = audience
        self._transport = transport
        self._signing_key: jwk.RSAKey | None = None

    @property
    def self_signed(self) -> bool:
        return not self._scopes

    @property
    def scopes(self) -> list[str]:
        return list(self._scopes)

    def _sign(self, claims: dict) -> str:
        if self._signing_key is None:
            self._signing_key = import_signing_key(self._credentials.private_key)
        return sign_jwt(claims, self._signing_key, self._credentials.private_key_id)

    def build_assertion(self, issued_at: int) -> str:
        """Signed assertion for the JWT bearer grant."""
        claims = build_claims(
            issuer=self._credentials.client_email,
            audience=OAUTH_TOKEN_AUDIENCE,
            issued_at=issued_at,
            scope=" ".join(self._scopes),
        )
        return self._sign(claims)

    def build_self_signed_jwt(self, issued_at: int) -> str:
        """Signed JWT used directly as the bearer token for ``audience``.

        Raises:
            ValueError: The provider was built without an audience.
        """
        if not self._audience:
            raise ValueError("audience is required for self-signed JWTs")
        claims = build_claims(
            issuer=self._credentials.client_email,
            audience=self._audience,
            issued_at=issued_at,
        )
        return self._sign(claims)

    async def _refresh(self) -> AccessToken:
        issued_at = int(self._clock())
        if self.self_signed:
            value = self.build_self_signed_jwt(issued_at)
            return AccessToken(value=value, expires_at=issued_at + JWT_LIFETIME_SECONDS)

        assertion = self.build_assertion(issued_at)
        logger.debug(
            "gcpauth.service_account.exchange",
            client_email=self._credentials.client_email,
            token_uri=self._credentials.token_uri,
            scope_count=len(self._scopes),
        )
        response = await fetch_token_response(
            "POST",
            self._credentials.token_uri,
            data={"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": assertion},
            transport=self._transport,
        )
        return to_access_token(response, issued_at)
