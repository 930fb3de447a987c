"""Tests for gcpauth error handling."""

from gcpauth.errors import (
    CredentialLoadError,
    CredentialsNotFoundError,
    GcpAuthError,
    MalformedCredentialsError,
    TokenAcquisitionError,
    TokenDecodingError,
    TokenHTTPStatusError,
    TokenNetworkError,
    TokenSigningError,
    TokenTimeoutError,
    UnsupportedCredentialShapeError,
)


class TestGcpAuthError:
    """Test GcpAuthError base class."""

    def test_basic_error_creation(self) -> None:
        error = GcpAuthError(code="gcpauth:test/error", message="Test error message")

        assert error.code == "gcpauth:test/error"
        assert error.message == "Test error message"
        assert error.details == {}
        assert str(error) == "Test error message"

    def test_to_dict(self) -> None:
        error = GcpAuthError("gcpauth:test/error", "msg", {"key": "value"})

        assert error.to_dict() == {
            "code": "gcpauth:test/error",
            "message": "msg",
            "details": {"key": "value"},
        }

    def test_error_details_not_shared(self) -> None:
        error1 = GcpAuthError("code", "msg", {"key": "value1"})
        error2 = GcpAuthError("code", "msg", {"key": "value2"})

        assert error1.details["key"] == "value1"
        assert error2.details["key"] == "value2"


class TestCredentialLoadErrors:
    """Test the credential resolution family."""

    def test_not_found(self) -> None:
        error = CredentialsNotFoundError("nothing here", details={"path": "/x"})

        assert isinstance(error, CredentialLoadError)
        assert error.kind == "not_found"
        assert error.code == "gcpauth:credentials/not_found"
        assert error.details == {"path": "/x"}

    def test_malformed_carries_source_and_reason(self) -> None:
        error = MalformedCredentialsError("/tmp/sa.json", "missing or invalid fields: private_key")

        assert isinstance(error, CredentialLoadError)
        assert error.kind == "malformed"
        assert error.source == "/tmp/sa.json"
        assert "private_key" in error.reason
        assert "Malformed credentials from /tmp/sa.json" in str(error)
        assert error.details["source"] == "/tmp/sa.json"

    def test_unsupported_shape_lists_supported(self) -> None:
        error = UnsupportedCredentialShapeError(
            "external_account", frozenset({"service_account", "authorized_user"})
        )

        assert error.kind == "unsupported_shape"
        assert error.shape == "external_account"
        assert error.details["supported_shapes"] == ["authorized_user", "service_account"]
        assert "authorized_user, service_account" in str(error)


class TestTokenAcquisitionErrors:
    """Test the token acquisition family."""

    def test_http_status_keeps_status_and_detail(self) -> None:
        error = TokenHTTPStatusError(
            "https://oauth2.googleapis.com/token", 400, "invalid_grant: Invalid JWT Signature."
        )

        assert isinstance(error, TokenAcquisitionError)
        assert error.kind == "http_status"
        assert error.status_code == 400
        assert error.detail == "invalid_grant: Invalid JWT Signature."
        assert "HTTP 400" in str(error)
        assert error.details["status_code"] == 400

    def test_kinds(self) -> None:
        assert TokenNetworkError("u", "refused").kind == "network"
        assert TokenTimeoutError("u", 10.0).kind == "timeout"
        assert TokenSigningError("bad key").kind == "signing_failure"
        assert TokenDecodingError("u", "not json").kind == "decoding_failure"

    def test_timeout_message(self) -> None:
        error = TokenTimeoutError("https://example.com/token", 10.0)

        assert error.code == "gcpauth:token/timeout"
        assert "timed out after 10.0s" in str(error)
        assert error.timeout == 10.0

    def test_families_are_distinct(self) -> None:
        assert not issubclass(TokenSigningError, CredentialLoadError)
        assert not issubclass(MalformedCredentialsError, TokenAcquisitionError)
        assert issubclass(TokenSigningError, GcpAuthError)
