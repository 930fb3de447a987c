"""Unit tests for the metadata server reachability probe."""

from __future__ import annotations

import httpx

from gcpauth.credentials.metadata import PROBE_ATTEMPTS, ping
from tests.factories import RecordingHandler, metadata_probe_response

BASE_URL = "http://metadata.google.internal"


async def test_ping_succeeds_when_flavor_is_echoed() -> None:
    handler = RecordingHandler(metadata_probe_response())

    assert await ping(BASE_URL, environ={}, transport=handler.transport()) is True
    assert handler.call_count == 1
    assert str(handler.requests[0].url).rstrip("/") == BASE_URL


async def test_ping_rejects_host_without_flavor_echo() -> None:
    handler = RecordingHandler(metadata_probe_response(echo_flavor=False))

    assert await ping(BASE_URL, environ={}, transport=handler.transport()) is False
    assert handler.call_count == PROBE_ATTEMPTS


async def test_ping_rejects_error_status_even_with_echo() -> None:
    handler = RecordingHandler(metadata_probe_response(status_code=503))

    assert await ping(BASE_URL, environ={}, transport=handler.transport()) is False


async def test_ping_retries_after_transient_failures() -> None:
    attempts = 0

    def flaky(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, headers={"Metadata-Flavor": "Google"})

    assert await ping(BASE_URL, environ={}, transport=httpx.MockTransport(flaky)) is True
    assert attempts == 3


async def test_ping_honors_attempt_budget() -> None:
    handler = RecordingHandler(metadata_probe_response(echo_flavor=False))

    assert await ping(BASE_URL, attempts=2, environ={}, transport=handler.transport()) is False
    assert handler.call_count == 2


async def test_no_gce_check_skips_requests() -> None:
    handler = RecordingHandler(metadata_probe_response())

    result = await ping(BASE_URL, environ={"NO_GCE_CHECK": "1"}, transport=handler.transport())

    assert result is False
    assert handler.call_count == 0


async def test_falsy_no_gce_check_still_probes() -> None:
    handler = RecordingHandler(metadata_probe_response())

    result = await ping(BASE_URL, environ={"NO_GCE_CHECK": "0"}, transport=handler.transport())

    assert result is True


async def test_unparsable_host_counts_as_failed_attempt() -> None:
    handler = RecordingHandler(metadata_probe_response())

    result = await ping("http://[::1", attempts=2, environ={}, transport=handler.transport())

    assert result is False
    assert handler.call_count == 0
