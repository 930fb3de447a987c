"""gcpauth Error Taxonomy.

This module defines the error hierarchy for credential resolution and
access-token acquisition. Every error carries a stable code, a
human-readable message, and a details dict with enough context to tell a
misconfigured credential file from a permission problem or a network fault.

Two families exist:

- CredentialLoadError: raised while resolving a credential source
  (not found, malformed, unsupported shape).
- TokenAcquisitionError: raised by token providers while producing a
  bearer token (network, timeout, HTTP status, signing, decoding).
"""
from __future__ import annotations

from typing import Any


class GcpAuthError(Exception):
    """Base exception for all gcpauth errors.

    Attributes:
        code: Error code following the gcpauth:<family>/<kind> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    kind: str = "error"

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class CredentialLoadError(GcpAuthError):
    """Raised when a credential source cannot be resolved."""


class CredentialsNotFoundError(CredentialLoadError):
    """Raised when no credential source could be located.

    Covers an absent file, an unset environment variable for an explicit
    strategy, and an unreachable metadata server when it was required.
    """

    kind = "not_found"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gcpauth:credentials/not_found",
            message=message,
            details=details or {},
        )


class MalformedCredentialsError(CredentialLoadError):
    """Raised when a credential document is not valid JSON or misses fields.

    Attributes:
        source: Where the document came from (file path or env variable name)
        reason: Why the document was rejected
    """

    kind = "malformed"

    def __init__(self, source: str, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Malformed credentials from {source}: {reason}"
        super().__init__(
            code="gcpauth:credentials/malformed",
            message=message,
            details={"source": source, "reason": reason, **(details or {})},
        )
        self.source = source
        self.reason = reason


class UnsupportedCredentialShapeError(CredentialLoadError):
    """Raised when a credential document declares a type this package cannot use.

    Attributes:
        shape: The unsupported ``type`` value (or source class name)
        supported_shapes: Shapes that are understood
    """

    kind = "unsupported_shape"

    def __init__(
        self,
        shape: str,
        supported_shapes: set[str] | frozenset[str],
        details: dict[str, Any] | None = None,
    ) -> None:
        supported_list = sorted(supported_shapes)
        message = (
            f"Unsupported credential type '{shape}'. "
            f"Supported types: {', '.join(supported_list)}"
        )
        super().__init__(
            code="gcpauth:credentials/unsupported_shape",
            message=message,
            details={
                "shape": shape,
                "supported_shapes": list(supported_list),
                **(details or {}),
            },
        )
        self.shape = shape
        self.supported_shapes = supported_shapes


class TokenAcquisitionError(GcpAuthError):
    """Raised when a token provider fails to produce a bearer token."""


class TokenNetworkError(TokenAcquisitionError):
    """Raised on connection failures or other transport errors."""

    kind = "network"

    def __init__(self, url: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gcpauth:token/network",
            message=f"Network error while requesting {url}: {reason}",
            details={"url": url, "reason": reason, **(details or {})},
        )
        self.url = url
        self.reason = reason


class TokenTimeoutError(TokenAcquisitionError):
    """Raised when a token request exceeds its per-call timeout."""

    kind = "timeout"

    def __init__(self, url: str, timeout: float, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gcpauth:token/timeout",
            message=f"Request to {url} timed out after {timeout}s",
            details={"url": url, "timeout": timeout, **(details or {})},
        )
        self.url = url
        self.timeout = timeout


class TokenHTTPStatusError(TokenAcquisitionError):
    """Raised when a token endpoint answers with a non-success status.

    Attributes:
        status_code: HTTP status returned by the endpoint
        detail: Decoded upstream error (OAuth ``error``/``error_description``
            or the raw body text)
    """

    kind = "http_status"

    def __init__(
        self,
        url: str,
        status_code: int,
        detail: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="gcpauth:token/http_status",
            message=f"Token endpoint {url} returned HTTP {status_code}: {detail}",
            details={"url": url, "status_code": status_code, "detail": detail, **(details or {})},
        )
        self.url = url
        self.status_code = status_code
        self.detail = detail


class TokenSigningError(TokenAcquisitionError):
    """Raised when a JWT cannot be built or signed with the service-account key."""

    kind = "signing_failure"

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gcpauth:token/signing_failure",
            message=f"Failed to sign JWT: {reason}",
            details={"reason": reason, **(details or {})},
        )
        self.reason = reason


class TokenDecodingError(TokenAcquisitionError):
    """Raised when a token response body cannot be decoded."""

    kind = "decoding_failure"

    def __init__(self, url: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gcpauth:token/decoding_failure",
            message=f"Could not decode token response from {url}: {reason}",
            details={"url": url, "reason": reason, **(details or {})},
        )
        self.url = url
        self.reason = reason
