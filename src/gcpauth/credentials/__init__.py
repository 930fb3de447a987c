"""Credential resolution for gcpauth.

Public exports:
    CredentialsResolver: Turns a strategy into a credential source
    parse_credentials: Parse a credential JSON document
    FilePath, EnvironmentJSON, Environment, MetadataServer: Loading strategies
    CredentialShape: Credential document shapes
    resolve_project_id: Project id for a credential source
"""

from gcpauth.credentials.environment import resolve_project_id
from gcpauth.credentials.resolver import CredentialsResolver, parse_credentials
from gcpauth.credentials.strategy import (
    CredentialShape,
    CredentialsLoadingStrategy,
    Environment,
    EnvironmentJSON,
    FilePath,
    MetadataServer,
)

__all__ = [
    "CredentialShape",
    "CredentialsLoadingStrategy",
    "CredentialsResolver",
    "Environment",
    "EnvironmentJSON",
    "FilePath",
    "MetadataServer",
    "parse_credentials",
    "resolve_project_id",
]
