"""Credential loading strategies.

A strategy tells the resolver where to look for credentials. The set is
closed: explicit file, inline JSON from the environment, ambient discovery,
and the metadata server.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CredentialShape(str, Enum):
    """Credential document shapes, keyed by their JSON ``type`` value."""

    SERVICE_ACCOUNT = "service_account"
    DELEGATED_USER = "authorized_user"


@dataclass(frozen=True)
class FilePath:
    """Load a credential document from ``path``.

    When ``shape`` is None the document's ``type`` field decides.
    """

    path: str | Path
    shape: CredentialShape | None = None


@dataclass(frozen=True)
class EnvironmentJSON:
    """Parse GOOGLE_APPLICATION_CREDENTIALS as an inline JSON document."""


@dataclass(frozen=True)
class Environment:
    """Ambient discovery (Application Default Credentials order)."""


@dataclass(frozen=True)
class MetadataServer:
    """Use the metadata server directly.

    With ``probe=True`` the server must answer the reachability probe,
    otherwise resolution fails.
    """

    probe: bool = False


CredentialsLoadingStrategy = FilePath | EnvironmentJSON | Environment | MetadataServer
