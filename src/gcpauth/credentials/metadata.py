"""Metadata server constants and reachability probe.

The metadata server is only reachable from inside Google Cloud hosting
environments. Every request carries the ``Metadata-Flavor: Google`` header and
a genuine server echoes it back; a response without the echo comes from
some unrelated host and is treated as unreachable.
"""

from __future__ import annotations

import os
from typing import Any, Mapping

import httpx

from gcpauth.credentials.environment import ENV_NO_GCE_CHECK, is_truthy
from gcpauth.observability import get_logger

logger = get_logger(__name__)

METADATA_FLAVOR_HEADER = "Metadata-Flavor"
METADATA_FLAVOR_VALUE = "Google"
METADATA_HEADERS = {METADATA_FLAVOR_HEADER: METADATA_FLAVOR_VALUE}

TOKEN_PATH = "/computeMetadata/v1/instance/service-accounts/default/token"

PROBE_ATTEMPTS = 5
PROBE_TIMEOUT_SECONDS = 0.5


def _is_genuine(response: httpx.Response) -> bool:
    return (
        response.is_success
        and response.headers.get(METADATA_FLAVOR_HEADER) == METADATA_FLAVOR_VALUE
    )


async def ping(
    base_url: str,
    *,
    attempts: int = PROBE_ATTEMPTS,
    timeout: float = PROBE_TIMEOUT_SECONDS,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Check whether a metadata server answers at ``base_url``.

    Issues up to ``attempts`` GET requests, each bounded by ``timeout``.
    Network errors, timeouts and an unparsable URL count as failed attempts. Setting
    NO_GCE_CHECK skips the probe entirely.

    Args:
        base_url: Metadata server base URL.
        attempts: Maximum number of probe requests.
        timeout: Per-request timeout in seconds.
        environ: Environment mapping (defaults to os.environ).
        transport: Optional httpx transport for testing.

    Returns:
        True if one attempt got a success status with the flavor header echoed.
    """
    env = os.environ if environ is None else environ
    if is_truthy(env.get(ENV_NO_GCE_CHECK)):
        logger.debug("gcpauth.metadata.probe_skipped", reason=ENV_NO_GCE_CHECK)
        return False

    kwargs: dict[str, Any] = {"timeout": httpx.Timeout(timeout)}
    if transport is not None:
        kwargs["transport"] = transport

    async with httpx.AsyncClient(**kwargs) as client:
        for attempt in range(1, attempts + 1):
            try:
                resp = await client.get(base_url, headers=METADATA_HEADERS)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.debug(
                    "gcpauth.metadata.probe_failed",
                    url=base_url,
                    attempt=attempt,
                    error=type(exc).__name__,
                )
                continue
            if _is_genuine(resp):
                logger.info("gcpauth.metadata.reachable", url=base_url, attempt=attempt)
                return True
            logger.debug(
                "gcpauth.metadata.probe_rejected",
                url=base_url,
                attempt=attempt,
                status_code=resp.status_code,
            )

    logger.info("gcpauth.metadata.unreachable", url=base_url, attempts=attempts)
    return False
