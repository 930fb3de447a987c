"""gcpauth: credential resolution and access tokens for Google Cloud APIs.

Example:
    >>> from gcpauth import load_credentials, SCOPE_CLOUD_PLATFORM
    >>> creds = await load_credentials(scopes=[SCOPE_CLOUD_PLATFORM])
    >>> token = await creds.provider.get_access_token()
"""

from gcpauth.credentials import (
    CredentialShape,
    CredentialsResolver,
    Environment,
    EnvironmentJSON,
    FilePath,
    MetadataServer,
    resolve_project_id,
)
from gcpauth.errors import (
    CredentialLoadError,
    CredentialsNotFoundError,
    GcpAuthError,
    MalformedCredentialsError,
    TokenAcquisitionError,
    TokenDecodingError,
    TokenHTTPStatusError,
    TokenNetworkError,
    TokenSigningError,
    TokenTimeoutError,
    UnsupportedCredentialShapeError,
)
from gcpauth.models import (
    AccessToken,
    DelegatedUserCredentials,
    MetadataServerCredentials,
    ServiceAccountCredentials,
)
from gcpauth.providers import (
    AccessTokenProvider,
    DelegatedUserCredentialsProvider,
    MetadataServerCredentialsProvider,
    ServiceAccountCredentialsProvider,
    make_token_provider,
)
from gcpauth.scopes import SCOPE_CLOUD_PLATFORM
from gcpauth.session import ResolvedCredentials, load_credentials

__version__ = "0.1.0"

__all__ = [
    "AccessToken",
    "AccessTokenProvider",
    "CredentialLoadError",
    "CredentialShape",
    "CredentialsNotFoundError",
    "CredentialsResolver",
    "DelegatedUserCredentials",
    "DelegatedUserCredentialsProvider",
    "Environment",
    "EnvironmentJSON",
    "FilePath",
    "GcpAuthError",
    "MalformedCredentialsError",
    "MetadataServer",
    "MetadataServerCredentials",
    "MetadataServerCredentialsProvider",
    "ResolvedCredentials",
    "SCOPE_CLOUD_PLATFORM",
    "ServiceAccountCredentials",
    "ServiceAccountCredentialsProvider",
    "TokenAcquisitionError",
    "TokenDecodingError",
    "TokenHTTPStatusError",
    "TokenNetworkError",
    "TokenSigningError",
    "TokenTimeoutError",
    "UnsupportedCredentialShapeError",
    "__version__",
    "load_credentials",
    "make_token_provider",
    "resolve_project_id",
]
