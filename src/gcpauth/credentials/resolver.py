"""Credential resolution.

Turns a loading strategy into one concrete credential source. The ambient
strategy follows the Application Default Credentials order:

1. GOOGLE_APPLICATION_CREDENTIALS holding inline JSON (value starts with ``{``)
2. GOOGLE_APPLICATION_CREDENTIALS holding a file path
3. the gcloud well-known file
4. the metadata server, if the reachability probe succeeds

Fallthrough only happens between sources that are absent. A document that
exists but fails to parse is always a hard error.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from gcpauth.credentials.environment import (
    ENV_CREDENTIALS,
    metadata_base_url,
    well_known_file_path,
)
from gcpauth.credentials.metadata import PROBE_ATTEMPTS, PROBE_TIMEOUT_SECONDS, ping
from gcpauth.credentials.strategy import (
    CredentialShape,
    CredentialsLoadingStrategy,
    Environment,
    EnvironmentJSON,
    FilePath,
    MetadataServer,
)
from gcpauth.errors import (
    CredentialsNotFoundError,
    MalformedCredentialsError,
    UnsupportedCredentialShapeError,
)
from gcpauth.models import (
    CredentialSource,
    DelegatedUserCredentials,
    MetadataServerCredentials,
    ServiceAccountCredentials,
)
from gcpauth.observability import get_logger

logger = get_logger(__name__)

SUPPORTED_SHAPES = frozenset(shape.value for shape in CredentialShape)

_MODELS: dict[CredentialShape, Any] = {
    CredentialShape.SERVICE_ACCOUNT: ServiceAccountCredentials,
    CredentialShape.DELEGATED_USER: DelegatedUserCredentials,
}


def _shape_from_type(data: dict[str, Any], source: str) -> CredentialShape:
    type_value = data.get("type")
    if not isinstance(type_value, str) or not type_value:
        raise MalformedCredentialsError(source, "missing 'type' field")
    try:
        return CredentialShape(type_value)
    except ValueError as exc:
        raise UnsupportedCredentialShapeError(type_value, SUPPORTED_SHAPES) from exc


def parse_credentials(
    raw: str | bytes,
    source: str,
    shape: CredentialShape | None = None,
) -> ServiceAccountCredentials | DelegatedUserCredentials:
    """Parse a credential JSON document.

    Args:
        raw: The JSON text.
        source: Human-readable origin used in error messages.
        shape: Declared shape; when None the ``type`` field decides.

    Returns:
        The parsed credential model.

    Raises:
        MalformedCredentialsError: Invalid JSON, non-object document, or
            missing/invalid required fields.
        UnsupportedCredentialShapeError: ``type`` names an unknown shape.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedCredentialsError(source, f"invalid JSON ({exc.msg})") from exc
    if not isinstance(data, dict):
        raise MalformedCredentialsError(source, "document must be a JSON object")

    if shape is None:
        shape = _shape_from_type(data, source)

    try:
        credentials = _MODELS[shape].model_validate(data)
    except ValidationError as exc:
        # Only field locations are reported, never the offending values
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise MalformedCredentialsError(
            source,
            f"missing or invalid fields: {', '.join(fields)}",
            details={"fields": fields, "shape": shape.value},
        ) from exc
    return credentials  # type: ignore[no-any-return]


class CredentialsResolver:
    """Resolves a CredentialsLoadingStrategy to a credential source.

    File reads run in a worker thread so resolution never blocks the event
    loop.

    Example:
        >>> resolver = CredentialsResolver()
        >>> source = await resolver.resolve(Environment())
        >>> isinstance(source, ServiceAccountCredentials)
        True
    """

    def __init__(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        well_known_file: str | Path | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        probe_attempts: int = PROBE_ATTEMPTS,
        probe_timeout: float = PROBE_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the resolver.

        Args:
            environ: Environment mapping (defaults to os.environ).
            well_known_file: Override for the gcloud well-known file location.
            transport: Optional httpx transport for the metadata probe (testing).
            probe_attempts: Maximum metadata probe attempts.
            probe_timeout: Per-attempt probe timeout in seconds.
        """
        self._environ: Mapping[str, str] = os.environ if environ is None else environ
        self._well_known_file = Path(well_known_file) if well_known_file is not None else None
        self._transport = transport
        self._probe_attempts = probe_attempts
        self._probe_timeout = probe_timeout

    @property
    def metadata_base_url(self) -> str:
        return metadata_base_url(self._environ)

    async def resolve(
        self, strategy: CredentialsLoadingStrategy | None = None
    ) -> CredentialSource:
        """Resolve ``strategy`` (ambient discovery when None) to a credential source.

        Raises:
            CredentialsNotFoundError: No source found, or a required source is absent.
            MalformedCredentialsError: A located document failed to parse.
            UnsupportedCredentialShapeError: A located document has an unknown type.
        """
        strategy = strategy if strategy is not None else Environment()

        source: CredentialSource
        if isinstance(strategy, FilePath):
            source = await self._load_file(Path(strategy.path), strategy.shape)
        elif isinstance(strategy, EnvironmentJSON):
            source = self._load_inline_json()
        elif isinstance(strategy, Environment):
            source = await self._resolve_ambient()
        elif isinstance(strategy, MetadataServer):
            source = await self._resolve_metadata_server(strategy.probe)
        else:
            raise TypeError(f"Unknown credentials loading strategy: {strategy!r}")

        logger.info(
            "gcpauth.resolver.resolved",
            strategy=type(strategy).__name__,
            source=type(source).__name__,
        )
        return source

    async def _load_file(
        self, path: Path, shape: CredentialShape | None
    ) -> ServiceAccountCredentials | DelegatedUserCredentials:
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as exc:
            raise CredentialsNotFoundError(
                f"Credentials file not found: {path}",
                details={"path": str(path)},
            ) from exc
        except UnicodeDecodeError as exc:
            raise MalformedCredentialsError(str(path), "file is not UTF-8 text") from exc
        except OSError as exc:
            raise CredentialsNotFoundError(
                f"Credentials file could not be read: {path} ({exc.strerror or exc})",
                details={"path": str(path)},
            ) from exc
        return parse_credentials(raw, str(path), shape)

    def _load_inline_json(self) -> ServiceAccountCredentials | DelegatedUserCredentials:
        value = self._environ.get(ENV_CREDENTIALS, "")
        if not value.strip():
            raise CredentialsNotFoundError(
                f"Environment variable {ENV_CREDENTIALS} is not set or empty",
                details={"variable": ENV_CREDENTIALS},
            )
        if not value.lstrip().startswith("{"):
            raise MalformedCredentialsError(ENV_CREDENTIALS, "value is not an inline JSON document")
        return parse_credentials(value, ENV_CREDENTIALS)

    async def _resolve_ambient(self) -> CredentialSource:
        value = self._environ.get(ENV_CREDENTIALS, "")
        if value.lstrip().startswith("{"):
            return self._load_inline_json()
        if value.strip():
            return await self._load_file(Path(value.strip()), None)

        well_known = self._well_known_file or well_known_file_path(self._environ)
        if await asyncio.to_thread(well_known.is_file):
            return await self._load_file(well_known, None)
        logger.debug("gcpauth.resolver.well_known_file_absent", path=str(well_known))

        base_url = self.metadata_base_url
        if await self._probe(base_url):
            return MetadataServerCredentials(base_url=base_url)

        raise CredentialsNotFoundError(
            "Could not automatically determine credentials. Set "
            f"{ENV_CREDENTIALS}, run 'gcloud auth application-default login', "
            "or run inside a Google Cloud environment with a metadata server.",
            details={"well_known_file": str(well_known), "metadata_url": base_url},
        )

    async def _resolve_metadata_server(self, probe: bool) -> MetadataServerCredentials:
        base_url = self.metadata_base_url
        if probe and not await self._probe(base_url):
            raise CredentialsNotFoundError(
                f"Metadata server at {base_url} is unreachable",
                details={"metadata_url": base_url, "attempts": self._probe_attempts},
            )
        return MetadataServerCredentials(base_url=base_url)

    async def _probe(self, base_url: str) -> bool:
        return await ping(
            base_url,
            attempts=self._probe_attempts,
            timeout=self._probe_timeout,
            environ=self._environ,
            transport=self._transport,
        )
