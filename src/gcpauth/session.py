"""One-call credential loading: resolve, pick a provider, derive the project."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

import httpx

from gcpauth.credentials.environment import resolve_project_id
from gcpauth.credentials.resolver import CredentialsResolver
from gcpauth.credentials.strategy import CredentialsLoadingStrategy, Environment
from gcpauth.models import CredentialSource
from gcpauth.providers.base import AccessTokenProvider
from gcpauth.providers.factory import make_token_provider


@dataclass(frozen=True)
class ResolvedCredentials:
    """A credential source with its token provider and project id."""

    source: CredentialSource
    provider: AccessTokenProvider
    project_id: str


async def load_credentials(
    strategy: CredentialsLoadingStrategy | None = None,
    scopes: Iterable[str] | None = None,
    *,
    audience: str | None = None,
    resolver: CredentialsResolver | None = None,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ResolvedCredentials:
    """Resolve ``strategy`` and build the matching token provider.

    Args:
        strategy: Loading strategy; ambient discovery when None.
        scopes: OAuth scopes for the provider.
        audience: Target API base URL for self-signed service-account JWTs.
        resolver: Resolver to use (a default one is built from ``environ``).
        environ: Environment mapping for resolution and project id fallback.
        transport: Optional httpx transport shared by probe and provider.

    Example:
        >>> creds = await load_credentials(scopes=[SCOPE_CLOUD_PLATFORM])
        >>> headers = await creds.provider.get_authorization_header()
        >>> url = f"https://pubsub.googleapis.com/v1/projects/{creds.project_id}/topics"
    """
    resolver = resolver or CredentialsResolver(environ=environ, transport=transport)
    source = await resolver.resolve(strategy if strategy is not None else Environment())
    provider = make_token_provider(source, scopes, audience=audience, transport=transport)
    return ResolvedCredentials(
        source=source,
        provider=provider,
        project_id=resolve_project_id(source, environ),
    )
