"""Token provider for delegated user credentials (refresh token grant)."""

from __future__ import annotations

import time
from typing import Callable

import httpx

from gcpauth.models import AccessToken, DelegatedUserCredentials
from gcpauth.providers.base import AccessTokenProvider
from gcpauth.providers.http import fetch_token_response, to_access_token

GOOGLE_OAUTH_TOKEN_URL = "https://oauth2.googleapis.com/token"
QUOTA_PROJECT_HEADER = "x-goog-user-project"


class DelegatedUserCredentialsProvider(AccessTokenProvider):
    """Exchanges a gcloud user refresh token for access tokens.

    The refresh token already encodes the scopes granted at login, so no
    scope list is sent.
    """

    name = "delegated_user"
    refresh_skew = 300.0

    def __init__(
        self,
        credentials: DelegatedUserCredentials,
        *,
        token_url: str = GOOGLE_OAUTH_TOKEN_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(clock=clock)
        self._credentials = credentials
        self._token_url = token_url
        self._transport = transport

    async def _refresh(self) -> AccessToken:
        requested_at = self._clock()
        headers = {}
        if self._credentials.quota_project_id:
            headers[QUOTA_PROJECT_HEADER] = self._credentials.quota_project_id
        response = await fetch_token_response(
            "POST",
            self._token_url,
            data={
                "client_id": self._credentials.client_id,
                "client_secret": self._credentials.client_secret,
                "refresh_token": self._credentials.refresh_token,
                "grant_type": "refresh_token",
            },
            headers=headers,
            transport=self._transport,
        )
        return to_access_token(response, requested_at)
