"""HTTP exchange shared by the token providers.

Each call opens its own httpx client with a per-call timeout, reads at most
``max_bytes`` of the response body, and maps every failure onto the
TokenAcquisitionError taxonomy. No retries are performed here.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from gcpauth.errors import (
    TokenDecodingError,
    TokenHTTPStatusError,
    TokenNetworkError,
    TokenTimeoutError,
)
from gcpauth.models import AccessToken, OAuthErrorResponse, TokenResponse

TOKEN_REQUEST_TIMEOUT_SECONDS = 10.0
MAX_RESPONSE_BYTES = 1024 * 1024

# Raw error bodies are truncated to this many characters in error details
_MAX_DETAIL_CHARS = 512


async def _read_limited(response: httpx.Response, url: str, max_bytes: int) -> bytes:
    body = bytearray()
    async for chunk in response.aiter_bytes():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise TokenDecodingError(url, f"response body exceeds {max_bytes} bytes")
    return bytes(body)


def describe_error_body(body: bytes) -> str:
    """Decode an error body as an OAuth error, falling back to raw text."""
    try:
        return OAuthErrorResponse.model_validate_json(body).describe()
    except ValidationError:
        text = body.decode("utf-8", errors="replace").strip()
        return text[:_MAX_DETAIL_CHARS] or "<empty body>"


async def fetch_token_response(
    method: str,
    url: str,
    *,
    data: Mapping[str, str] | None = None,
    params: Mapping[str, str] | None = None,
    headers: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = TOKEN_REQUEST_TIMEOUT_SECONDS,
    max_bytes: int = MAX_RESPONSE_BYTES,
) -> TokenResponse:
    """Send a token request and decode the ``{access_token, expires_in, ...}`` body.

    ``data`` is sent form-encoded (application/x-www-form-urlencoded).

    Args:
        method: HTTP method (GET for the metadata server, POST for OAuth).
        url: Token endpoint URL.
        data: Form fields for the request body.
        params: Query parameters.
        headers: Extra request headers.
        transport: Optional httpx transport for testing.
        timeout: Per-call timeout in seconds.
        max_bytes: Response body size cap.

    Returns:
        The decoded TokenResponse.

    Raises:
        TokenTimeoutError: The request exceeded ``timeout``.
        TokenNetworkError: Connection or transport failure, or an invalid URL.
        TokenHTTPStatusError: Non-success status; detail holds the OAuth error.
        TokenDecodingError: Oversized or undecodable response body.
    """
    kwargs: dict[str, Any] = {"timeout": httpx.Timeout(timeout)}
    if transport is not None:
        kwargs["transport"] = transport

    try:
        async with httpx.AsyncClient(**kwargs) as client:
            async with client.stream(
                method,
                url,
                data=dict(data) if data is not None else None,
                params=dict(params) if params is not None else None,
                headers=dict(headers) if headers is not None else None,
            ) as resp:
                body = await _read_limited(resp, url, max_bytes)
                status_code = resp.status_code
    except httpx.TimeoutException as exc:
        raise TokenTimeoutError(url, timeout) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise TokenNetworkError(url, str(exc) or type(exc).__name__) from exc

    if not 200 <= status_code < 300:
        raise TokenHTTPStatusError(url, status_code, describe_error_body(body))

    try:
        return TokenResponse.model_validate_json(body)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "body" for err in exc.errors()})
        raise TokenDecodingError(url, f"invalid token response ({', '.join(fields)})") from exc


def to_access_token(response: TokenResponse, requested_at: float) -> AccessToken:
    """Convert a token response into a cache entry expiring at requested_at + expires_in."""
    return AccessToken(
        value=response.access_token,
        expires_at=requested_at + response.expires_in,
        token_type=response.token_type,
    )
