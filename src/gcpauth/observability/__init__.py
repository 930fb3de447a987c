"""Observability module for gcpauth.

Structured logging with secret redaction.

Example:
    >>> from gcpauth.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("gcpauth.token.refreshed", provider="metadata_server")
"""

from gcpauth.observability.logging import (
    REDACTED_PLACEHOLDER,
    configure_logging,
    get_logger,
    sanitize_for_logging,
)

__all__ = [
    "REDACTED_PLACEHOLDER",
    "configure_logging",
    "get_logger",
    "sanitize_for_logging",
]
