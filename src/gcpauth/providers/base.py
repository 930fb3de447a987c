"""Access-token provider capability with single-flight caching.

Every provider owns one cached AccessToken. ``get_access_token`` returns the
cached value while ``clock() < expires_at - refresh_skew`` and otherwise
joins the refresh in flight, starting one if none is running. The refresh
runs as its own task and each caller awaits it through ``asyncio.shield``:
a caller that is cancelled stops waiting, but the refresh completes and
updates the cache for everyone else.
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Callable

from gcpauth.errors import GcpAuthError
from gcpauth.models import AccessToken
from gcpauth.observability import get_logger

logger = get_logger(__name__)

# Seconds before expiry at which OAuth-issued tokens are refreshed
DEFAULT_REFRESH_SKEW_SECONDS = 300.0


def _consume_result(task: "asyncio.Task[AccessToken]") -> None:
    # Marks a failure as retrieved when every waiter has been cancelled
    if not task.cancelled():
        task.exception()


class AccessTokenProvider(ABC):
    """Produces bearer tokens for one resolved credential.

    Subclasses implement ``_refresh`` (one network round trip or local
    signing) and set ``refresh_skew``. Callers should ask for a token before
    every outgoing request instead of keeping it themselves; the provider
    owns the expiry policy.

    Example:
        >>> provider = make_token_provider(source, [SCOPE_CLOUD_PLATFORM])
        >>> headers = await provider.get_authorization_header()
    """

    name: str = "provider"
    refresh_skew: float = DEFAULT_REFRESH_SKEW_SECONDS

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the cache.

        Args:
            clock: Returns the current Unix time; injectable for tests.
        """
        self._clock = clock
        self._cached_token: AccessToken | None = None
        self._refresh_task: asyncio.Task[AccessToken] | None = None

    @property
    def cached_token(self) -> AccessToken | None:
        return self._cached_token

    def is_valid(self, token: AccessToken | None) -> bool:
        return token is not None and not token.is_expired(self._clock(), self.refresh_skew)

    async def get_access_token(self) -> str:
        """Return a bearer token, refreshing it when absent or near expiry.

        Raises:
            TokenAcquisitionError: The refresh failed (network, timeout,
                HTTP status, signing, or decoding).
        """
        token = self._cached_token
        if token is not None and self.is_valid(token):
            return token.value

        task = self._refresh_task
        if task is None:
            task = asyncio.create_task(self._run_refresh())
            task.add_done_callback(_consume_result)
            self._refresh_task = task
        token = await asyncio.shield(task)
        return token.value

    async def get_authorization_header(self) -> dict[str, str]:
        """Return ``{"Authorization": "Bearer <token>"}`` for an outgoing request."""
        value = await self.get_access_token()
        return {"Authorization": f"Bearer {value}"}

    def invalidate(self) -> None:
        """Drop the cached token so the next call refreshes."""
        self._cached_token = None

    async def _run_refresh(self) -> AccessToken:
        try:
            token = await self._refresh()
            self._cached_token = token
        except GcpAuthError as exc:
            logger.warning("gcpauth.token.refresh_failed", provider=self.name, code=exc.code)
            raise
        finally:
            self._refresh_task = None
        logger.info(
            "gcpauth.token.refreshed",
            provider=self.name,
            expires_in=int(token.expires_at - self._clock()),
        )
        return token

    @abstractmethod
    async def _refresh(self) -> AccessToken:
        """Obtain a new token from the issuing endpoint (no caching)."""
