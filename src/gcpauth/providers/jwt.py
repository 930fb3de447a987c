"""JWT construction and RS256 signing for service accounts.

Two token shapes are built here:

- the OAuth assertion (aud = Google token endpoint, scope claim) exchanged
  for an access token (https://google.aip.dev/auth/4112)
- the self-signed JWT (aud = target API) used directly as the bearer token
  (https://google.aip.dev/auth/4111)

Both live for JWT_LIFETIME_SECONDS and carry the key id in the header.
"""

from __future__ import annotations

from typing import Any

from joserfc import jwk
from joserfc import jwt as jose_jwt
from joserfc.errors import JoseError

from gcpauth.errors import TokenSigningError

JWT_LIFETIME_SECONDS = 3600
JWT_ALGORITHM = "RS256"
OAUTH_TOKEN_AUDIENCE = "https://oauth2.googleapis.com/token"
JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"


def build_claims(
    issuer: str,
    audience: str,
    issued_at: int,
    *,
    subject: str | None = None,
    scope: str | None = None,
) -> dict[str, Any]:
    """Build the claim set; ``exp`` is always ``iat + JWT_LIFETIME_SECONDS``."""
    claims: dict[str, Any] = {
        "iss": issuer,
        "sub": subject or issuer,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + JWT_LIFETIME_SECONDS,
    }
    if scope:
        claims["scope"] = scope
    return claims


def import_signing_key(private_key_pem: str) -> jwk.RSAKey:
    """Import a PEM encoded RSA private key.

    Raises:
        TokenSigningError: The PEM is not a usable RSA private key.
    """
    try:
        key = jwk.RSAKey.import_key(private_key_pem)
    except (JoseError, ValueError, TypeError) as exc:
        raise TokenSigningError("private_key is not a valid RSA PEM key") from exc
    if not key.is_private:
        raise TokenSigningError("private_key holds a public key only")
    return key


def sign_jwt(claims: dict[str, Any], key: jwk.RSAKey, key_id: str) -> str:
    """Sign ``claims`` with RS256 and return the compact serialization.

    Raises:
        TokenSigningError: Signing failed.
    """
    header = {"alg": JWT_ALGORITHM, "typ": "JWT", "kid": key_id}
    try:
        return jose_jwt.encode(header, claims, key)
    except (JoseError, ValueError, TypeError) as exc:
        raise TokenSigningError(type(exc).__name__) from exc
