"""Tests for provider selection."""

from __future__ import annotations

import pytest

from gcpauth.errors import UnsupportedCredentialShapeError
from gcpauth.models import (
    DelegatedUserCredentials,
    MetadataServerCredentials,
    ServiceAccountCredentials,
)
from gcpauth.providers import (
    DelegatedUserCredentialsProvider,
    MetadataServerCredentialsProvider,
    ServiceAccountCredentialsProvider,
    make_token_provider,
)
from gcpauth.scopes import SCOPE_CLOUD_PLATFORM
from tests.factories import make_delegated_user_info


def test_service_account_with_scopes_exchanges(service_account: ServiceAccountCredentials) -> None:
    provider = make_token_provider(service_account, [SCOPE_CLOUD_PLATFORM])

    assert isinstance(provider, ServiceAccountCredentialsProvider)
    assert provider.self_signed is False
    assert provider.scopes == [SCOPE_CLOUD_PLATFORM]


def test_service_account_without_scopes_self_signs(
    service_account: ServiceAccountCredentials,
) -> None:
    provider = make_token_provider(service_account, [], audience="https://pubsub.googleapis.com/")

    assert isinstance(provider, ServiceAccountCredentialsProvider)
    assert provider.self_signed is True


def test_service_account_without_scopes_or_audience(
    service_account: ServiceAccountCredentials,
) -> None:
    with pytest.raises(ValueError):
        make_token_provider(service_account)


def test_delegated_user() -> None:
    user = DelegatedUserCredentials.model_validate(make_delegated_user_info())

    provider = make_token_provider(user, [SCOPE_CLOUD_PLATFORM])

    assert isinstance(provider, DelegatedUserCredentialsProvider)
    assert provider.refresh_skew == 300


def test_metadata_server() -> None:
    provider = make_token_provider(MetadataServerCredentials(base_url="http://metadata.google.internal"))

    assert isinstance(provider, MetadataServerCredentialsProvider)
    assert provider.refresh_skew == 30


def test_unknown_source_is_rejected() -> None:
    with pytest.raises(UnsupportedCredentialShapeError) as exc_info:
        make_token_provider(object())  # type: ignore[arg-type]

    assert exc_info.value.shape == "object"
