"""Shared pytest fixtures for gcpauth tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from joserfc import jwk

from gcpauth.models import ServiceAccountCredentials

from tests.factories import make_delegated_user_info, make_service_account_info, write_json

# Variables that would leak the developer's real environment into tests
_ISOLATED_ENV_VARS = (
    "GOOGLE_APPLICATION_CREDENTIALS",
    "GCE_METADATA_HOST",
    "PROJECT_ID",
    "GOOGLE_PROJECT_ID",
    "GOOGLE_CLOUD_PROJECT",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Hide real credentials and never probe a real metadata server."""
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config_dir = tmp_path / "gcloud-config"
    config_dir.mkdir()
    monkeypatch.setenv("CLOUDSDK_CONFIG", str(config_dir))
    monkeypatch.setenv("NO_GCE_CHECK", "1")


@pytest.fixture(scope="session")
def rsa_key() -> jwk.RSAKey:
    """RSA key pair shared by the session (generation is slow)."""
    return jwk.RSAKey.generate_key(2048, private=True)


@pytest.fixture(scope="session")
def private_key_pem(rsa_key: jwk.RSAKey) -> str:
    return rsa_key.as_pem(private=True).decode("ascii")


@pytest.fixture
def service_account_info(private_key_pem: str) -> dict:
    return make_service_account_info(private_key_pem)


@pytest.fixture
def service_account(service_account_info: dict) -> ServiceAccountCredentials:
    return ServiceAccountCredentials.model_validate(service_account_info)


@pytest.fixture
def service_account_file(tmp_path: Path, service_account_info: dict) -> Path:
    return write_json(tmp_path / "service-account.json", service_account_info)


@pytest.fixture
def delegated_user_info() -> dict:
    return make_delegated_user_info()


@pytest.fixture
def delegated_user_file(tmp_path: Path, delegated_user_info: dict) -> Path:
    return write_json(tmp_path / "user.json", delegated_user_info)


@pytest.fixture
def service_account_json(service_account_info: dict) -> str:
    return json.dumps(service_account_info)
