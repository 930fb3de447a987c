"""Access-token providers.

Public exports:
    AccessTokenProvider: Capability with single-flight token caching
    ServiceAccountCredentialsProvider: Self-signed JWT or JWT bearer exchange
    MetadataServerCredentialsProvider: Tokens from the local metadata server
    DelegatedUserCredentialsProvider: Refresh-token exchange for gcloud users
    make_token_provider: Pick the provider for a resolved source
"""

from gcpauth.providers.base import AccessTokenProvider
from gcpauth.providers.delegated_user import DelegatedUserCredentialsProvider
from gcpauth.providers.factory import make_token_provider
from gcpauth.providers.metadata_server import MetadataServerCredentialsProvider
from gcpauth.providers.service_account import ServiceAccountCredentialsProvider

__all__ = [
    "AccessTokenProvider",
    "DelegatedUserCredentialsProvider",
    "MetadataServerCredentialsProvider",
    "ServiceAccountCredentialsProvider",
    "make_token_provider",
]
