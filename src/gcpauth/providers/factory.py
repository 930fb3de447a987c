"""Selects the token provider matching a resolved credential source."""

from __future__ import annotations

import time
from typing import Callable, Iterable

import httpx

from gcpauth.credentials.strategy import CredentialShape
from gcpauth.errors import UnsupportedCredentialShapeError
from gcpauth.models import (
    CredentialSource,
    DelegatedUserCredentials,
    MetadataServerCredentials,
    ServiceAccountCredentials,
)
from gcpauth.providers.base import AccessTokenProvider
from gcpauth.providers.delegated_user import DelegatedUserCredentialsProvider
from gcpauth.providers.metadata_server import MetadataServerCredentialsProvider
from gcpauth.providers.service_account import ServiceAccountCredentialsProvider

_SUPPORTED = frozenset(
    {
        CredentialShape.SERVICE_ACCOUNT.value,
        CredentialShape.DELEGATED_USER.value,
        "metadata_server",
    }
)


def make_token_provider(
    source: CredentialSource,
    scopes: Iterable[str] | None = None,
    *,
    audience: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Callable[[], float] = time.time,
) -> AccessTokenProvider:
    """Build the provider for ``source``; the choice is fixed for its lifetime.

    Args:
        source: Resolved credential source.
        scopes: OAuth scopes. Ignored for delegated users, whose refresh
            token carries the scopes granted at login.
        audience: Target API base URL for self-signed service-account JWTs.
        transport: Optional httpx transport for testing.
        clock: Returns the current Unix time.

    Raises:
        UnsupportedCredentialShapeError: ``source`` is not a known credential type.
        ValueError: Service account without scopes and without audience.
    """
    if isinstance(source, ServiceAccountCredentials):
        return ServiceAccountCredentialsProvider(
            source, scopes, audience=audience, transport=transport, clock=clock
        )
    if isinstance(source, DelegatedUserCredentials):
        return DelegatedUserCredentialsProvider(source, transport=transport, clock=clock)
    if isinstance(source, MetadataServerCredentials):
        return MetadataServerCredentialsProvider(
            source, scopes, transport=transport, clock=clock
        )
    raise UnsupportedCredentialShapeError(type(source).__name__, _SUPPORTED)
