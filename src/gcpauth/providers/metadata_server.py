"""Token provider backed by the local metadata server."""

from __future__ import annotations

import time
from typing import Callable, Iterable

import httpx

from gcpauth.credentials.metadata import METADATA_HEADERS, TOKEN_PATH
from gcpauth.models import AccessToken, MetadataServerCredentials
from gcpauth.providers.base import AccessTokenProvider
from gcpauth.providers.http import fetch_token_response, to_access_token
from gcpauth.scopes import normalize_scopes


class MetadataServerCredentialsProvider(AccessTokenProvider):
    """Fetches tokens for the default service account of the host.

    Metadata tokens have a shorter natural lifetime and the server is local,
    so the refresh skew is 30 seconds instead of five minutes.
    """

    name = "metadata_server"
    refresh_skew = 30.0

    def __init__(
        self,
        credentials: MetadataServerCredentials,
        scopes: Iterable[str] | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(clock=clock)
        self._credentials = credentials
        self._scopes = normalize_scopes(scopes)
        self._transport = transport

    @property
    def token_url(self) -> str:
        return self._credentials.base_url.rstrip("/") + TOKEN_PATH

    async def _refresh(self) -> AccessToken:
        requested_at = self._clock()
        params = {"scopes": ",".join(self._scopes)} if self._scopes else None
        response = await fetch_token_response(
            "GET",
            self.token_url,
            params=params,
            headers=METADATA_HEADERS,
            transport=self._transport,
        )
        return to_access_token(response, requested_at)
