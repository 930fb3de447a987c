"""Environment variables and well-known locations used during resolution."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

from gcpauth.models import (
    CredentialSource,
    DelegatedUserCredentials,
    ServiceAccountCredentials,
)

# Inline JSON document or path to a credential file
ENV_CREDENTIALS = "GOOGLE_APPLICATION_CREDENTIALS"
# Overrides the gcloud configuration directory
ENV_CLOUDSDK_CONFIG = "CLOUDSDK_CONFIG"
# Overrides the metadata server hostname (host or host:port)
ENV_METADATA_HOST = "GCE_METADATA_HOST"
# Skips the metadata server probe when truthy
ENV_NO_GCE_CHECK = "NO_GCE_CHECK"

# Checked in order when the credential source carries no project
PROJECT_ID_ENV_VARS = ("PROJECT_ID", "GOOGLE_PROJECT_ID", "GOOGLE_CLOUD_PROJECT")
DEFAULT_PROJECT_ID = "default"

WELL_KNOWN_FILE_NAME = "application_default_credentials.json"
DEFAULT_METADATA_HOST = "metadata.google.internal"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def is_truthy(value: str | None) -> bool:
    """Return True for 1/true/yes/on (case-insensitive)."""
    return (value or "").strip().lower() in _TRUTHY


def well_known_file_path(environ: Mapping[str, str]) -> Path:
    """Path of the file written by ``gcloud auth application-default login``."""
    config_dir = environ.get(ENV_CLOUDSDK_CONFIG)
    if config_dir:
        return Path(config_dir) / WELL_KNOWN_FILE_NAME
    if sys.platform == "win32" and environ.get("APPDATA"):
        return Path(environ["APPDATA"]) / "gcloud" / WELL_KNOWN_FILE_NAME
    return Path(os.path.expanduser("~")) / ".config" / "gcloud" / WELL_KNOWN_FILE_NAME


def metadata_base_url(environ: Mapping[str, str]) -> str:
    """Metadata server base URL, honoring GCE_METADATA_HOST."""
    host = environ.get(ENV_METADATA_HOST, "").strip() or DEFAULT_METADATA_HOST
    return f"http://{host}"


def resolve_project_id(
    source: CredentialSource,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Project a credential source bills against.

    Service-account keys carry their project; user credentials may carry a
    quota project. Otherwise (and always for the metadata server) the
    project comes from PROJECT_ID, GOOGLE_PROJECT_ID or GOOGLE_CLOUD_PROJECT,
    falling back to "default".
    """
    if isinstance(source, ServiceAccountCredentials):
        return source.project_id
    if isinstance(source, DelegatedUserCredentials) and source.quota_project_id:
        return source.quota_project_id
    env = os.environ if environ is None else environ
    for name in PROJECT_ID_ENV_VARS:
        value = env.get(name)
        if value:
            return value
    return DEFAULT_PROJECT_ID
