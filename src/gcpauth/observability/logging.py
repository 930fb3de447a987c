"""Structured logging configuration for gcpauth.

This module configures structlog for structured logging with support for
both development (console) and production (JSON) output formats.

Every event passes through a redaction processor, so credential material
(private keys, client secrets, refresh and access tokens, JWT assertions)
never reaches a log sink even if a caller binds it by mistake.

Environment Variables:
    GCPAUTH_LOG_FORMAT: Set to "json" for JSON output, "console" for colored output
    GCPAUTH_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR)
    GCPAUTH_SERVICE_NAME: Service name to include in logs

Example:
    >>> from gcpauth.observability.logging import get_logger, configure_logging
    >>>
    >>> configure_logging(log_format="json", log_level="INFO")
    >>> logger = get_logger("gcpauth.providers.service_account")
    >>> logger.info("gcpauth.token.refreshed", provider="service_account")
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

# Default configuration
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_SERVICE_NAME = "gcpauth"

# Environment variable names
ENV_LOG_FORMAT = "GCPAUTH_LOG_FORMAT"
ENV_LOG_LEVEL = "GCPAUTH_LOG_LEVEL"
ENV_SERVICE_NAME = "GCPAUTH_SERVICE_NAME"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Key names (case-insensitive) that carry secret material
_SENSITIVE_KEYS = frozenset({"token", "assertion", "authorization", "password", "secret"})
_SENSITIVE_SUFFIXES = ("_token", "_secret", "private_key", "_password")

_logging_configured = False


def _is_sensitive_key(key: str) -> bool:
    """Return True if the key name indicates secret material."""
    lower = key.lower()
    return lower in _SENSITIVE_KEYS or lower.endswith(_SENSITIVE_SUFFIXES)


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with secret values replaced.

    Nested dicts and lists of dicts are sanitized recursively. Keys such as
    ``token_uri`` or ``client_email`` are kept; ``private_key``,
    ``client_secret``, ``refresh_token`` and ``access_token`` are redacted.

    Example:
        >>> sanitize_for_logging({"client_email": "sa@p.iam", "private_key": "-----BEGIN"})
        {'client_email': 'sa@p.iam', 'private_key': '***REDACTED***'}
    """
    if not data:
        return {}
    result: dict[str, Any] = {}
    for k, v in data.items():
        if _is_sensitive_key(k):
            result[k] = REDACTED_PLACEHOLDER
        elif isinstance(v, dict):
            result[k] = sanitize_for_logging(v)
        elif isinstance(v, list):
            result[k] = [
                sanitize_for_logging(item) if isinstance(item, dict) else item for item in v
            ]
        else:
            result[k] = v
    return result


def redact_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """structlog processor applying sanitize_for_logging to every event."""
    return sanitize_for_logging(event_dict)


def _get_log_level() -> str:
    return os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()


def _get_log_format() -> str:
    return os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT).lower()


def _get_service_name() -> str:
    return os.environ.get(ENV_SERVICE_NAME, DEFAULT_SERVICE_NAME)


def _get_shared_processors() -> list[Processor]:
    """Get shared processors for all log formats."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Configure structured logging for the application.

    Args:
        log_format: Output format - "json" or "console". Defaults to env var or "console"
        log_level: Minimum log level. Defaults to env var or "INFO"
        service_name: Service name for log context. Defaults to env var or "gcpauth"
        force: If True, reconfigure even if already configured
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_format = log_format or _get_log_format()
    log_level = log_level or _get_log_level()
    service_name = service_name or _get_service_name()

    shared_processors = _get_shared_processors()

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # Logs go to stderr so CLI output on stdout stays machine-readable
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level))

    structlog.contextvars.bind_contextvars(service=service_name)

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given name.

    Configures logging with default settings on first use.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("gcpauth.resolver.resolved", source="service_account")
    """
    if not _logging_configured:
        configure_logging()

    return structlog.stdlib.get_logger(name)
