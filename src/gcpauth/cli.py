"""Command-line interface for gcpauth.

Example:
    >>> # From terminal:
    >>> # gcpauth --version
    >>> # gcpauth describe
    >>> # gcpauth print-access-token --scope https://www.googleapis.com/auth/cloud-platform
    >>> # gcpauth print-access-token --credentials-file sa.json --audience https://storage.googleapis.com/
    >>> # gcpauth print-access-token --metadata-server
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer

from gcpauth import __version__
from gcpauth.credentials.environment import resolve_project_id
from gcpauth.credentials.resolver import CredentialsResolver
from gcpauth.credentials.strategy import (
    CredentialShape,
    CredentialsLoadingStrategy,
    Environment,
    FilePath,
    MetadataServer,
)
from gcpauth.errors import GcpAuthError
from gcpauth.models import (
    DelegatedUserCredentials,
    MetadataServerCredentials,
    ServiceAccountCredentials,
)
from gcpauth.session import load_credentials

app = typer.Typer(help="Google Cloud credential resolution and access tokens.")

CredentialsFileOption = Annotated[
    Optional[Path],
    typer.Option("--credentials-file", "-f", help="Path to a credential JSON file."),
]
ShapeOption = Annotated[
    Optional[CredentialShape],
    typer.Option(
        "--shape",
        help="Declared shape of --credentials-file (default: read its 'type' field).",
    ),
]
MetadataServerOption = Annotated[
    bool,
    typer.Option("--metadata-server", help="Use the metadata server (probe it first)."),
]


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


VERSION_OPTION = typer.Option(
    False,
    "--version",
    help="Show gcpauth version and exit.",
    callback=_version_callback,
    is_eager=True,
)


@app.callback()
def cli(version: bool = VERSION_OPTION) -> None:
    """gcpauth CLI entrypoint."""


def _strategy(
    credentials_file: Optional[Path],
    shape: Optional[CredentialShape],
    metadata_server: bool,
) -> CredentialsLoadingStrategy:
    if credentials_file is not None and metadata_server:
        raise typer.BadParameter("--credentials-file and --metadata-server are mutually exclusive")
    if shape is not None and credentials_file is None:
        raise typer.BadParameter("--shape requires --credentials-file")
    if credentials_file is not None:
        return FilePath(credentials_file, shape)
    if metadata_server:
        return MetadataServer(probe=True)
    return Environment()


def _fail(exc: GcpAuthError) -> typer.Exit:
    typer.echo(f"Error: {exc.message}", err=True)
    return typer.Exit(1)


@app.command("print-access-token")
def print_access_token(
    credentials_file: CredentialsFileOption = None,
    shape: ShapeOption = None,
    metadata_server: MetadataServerOption = False,
    scope: Annotated[
        Optional[list[str]],
        typer.Option("--scope", "-s", help="OAuth scope URI (repeatable)."),
    ] = None,
    audience: Annotated[
        Optional[str],
        typer.Option(
            "--audience",
            help="Target API base URL for a self-signed service-account JWT (no scopes).",
        ),
    ] = None,
) -> None:
    """Resolve credentials and print a bearer token."""
    strategy = _strategy(credentials_file, shape, metadata_server)

    async def _token() -> str:
        creds = await load_credentials(strategy, scope or [], audience=audience)
        return await creds.provider.get_access_token()

    try:
        token = asyncio.run(_token())
    except GcpAuthError as exc:
        raise _fail(exc) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(token)


@app.command("describe")
def describe(
    credentials_file: CredentialsFileOption = None,
    shape: ShapeOption = None,
    metadata_server: MetadataServerOption = False,
) -> None:
    """Show which credential source resolves, its identity and project (no secrets)."""
    strategy = _strategy(credentials_file, shape, metadata_server)
    try:
        source = asyncio.run(CredentialsResolver().resolve(strategy))
    except GcpAuthError as exc:
        raise _fail(exc) from exc

    if isinstance(source, ServiceAccountCredentials):
        kind, identity = CredentialShape.SERVICE_ACCOUNT.value, source.client_email
    elif isinstance(source, DelegatedUserCredentials):
        kind, identity = CredentialShape.DELEGATED_USER.value, source.client_id
    elif isinstance(source, MetadataServerCredentials):
        kind, identity = "metadata_server", source.base_url
    else:
        kind, identity = type(source).__name__, "-"
    typer.echo(f"source: {kind}")
    typer.echo(f"identity: {identity}")
    typer.echo(f"project: {resolve_project_id(source)}")


def main() -> None:
    """Run the gcpauth CLI."""
    app()


if __name__ == "__main__":
    main()
