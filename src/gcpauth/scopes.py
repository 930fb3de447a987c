"""OAuth2 scope constants for Google Cloud APIs.

Scopes are passed to token providers as an ordered sequence of URIs. An
empty sequence is meaningful: service-account providers then mint
self-signed JWTs instead of exchanging an assertion.
"""

from __future__ import annotations

from typing import Any, Iterable

SCOPE_CLOUD_PLATFORM = "https://www.googleapis.com/auth/cloud-platform"
SCOPE_CLOUD_PLATFORM_READ_ONLY = "https://www.googleapis.com/auth/cloud-platform.read-only"
SCOPE_STORAGE_FULL_CONTROL = "https://www.googleapis.com/auth/devstorage.full_control"
SCOPE_STORAGE_READ_ONLY = "https://www.googleapis.com/auth/devstorage.read_only"
SCOPE_STORAGE_READ_WRITE = "https://www.googleapis.com/auth/devstorage.read_write"
SCOPE_DATASTORE = "https://www.googleapis.com/auth/datastore"
SCOPE_PUBSUB = "https://www.googleapis.com/auth/pubsub"
SCOPE_CLOUD_TRANSLATION = "https://www.googleapis.com/auth/cloud-translation"
SCOPE_FIREBASE_MESSAGING = "https://www.googleapis.com/auth/firebase.messaging"


def normalize_scopes(scopes: Any) -> list[str]:
    """Normalize a scope argument to an ordered, de-duplicated list.

    Accepts None, a space-separated string (RFC 6749) or any iterable of
    strings. Order of first appearance is kept.

    Args:
        scopes: Raw scope value.

    Returns:
        List of scope strings (empty if scopes is None or blank).
    """
    if scopes is None:
        return []
    items: Iterable[Any]
    if isinstance(scopes, str):
        items = scopes.split()
    else:
        items = scopes
    result: list[str] = []
    for item in items:
        scope = str(item).strip()
        if scope and scope not in result:
            result.append(scope)
    return result
