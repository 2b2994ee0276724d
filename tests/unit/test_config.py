"""Unit tests for SDK configuration and the options source."""

from __future__ import annotations

import base64

import pytest
from pydantic import ValidationError

from management_api_sdk.config import ApiClientConfig
from management_api_sdk.errors import InvalidConfigError
from management_api_sdk.jwks import JWKSCache

from tests.helpers import create_test_config


class TestValidation:
    def test_minimal(self) -> None:
        config = ApiClientConfig(domain="test.auth0.com", client_id="id", client_secret="secret")
        assert config.signing_algorithm == "RS256"
        assert config.verify_audience is False
        assert config.app_token is None
        assert config.cache.token_key == "api_token"

    @pytest.mark.parametrize("domain", ["https://test.auth0.com", "test.auth0.com/api", "", "a b"])
    def test_rejects_bad_domain(self, domain: str) -> None:
        with pytest.raises(ValidationError):
            ApiClientConfig(domain=domain, client_id="id", client_secret="secret")

    def test_domain_whitespace_stripped(self) -> None:
        config = ApiClientConfig(domain=" test.auth0.com ", client_id="id", client_secret="s")
        assert config.domain == "test.auth0.com"

    def test_requires_client_id(self) -> None:
        with pytest.raises(ValidationError):
            ApiClientConfig(domain="test.auth0.com", client_id="", client_secret="secret")

    def test_frozen(self, base_config: ApiClientConfig) -> None:
        with pytest.raises(ValidationError):
            base_config.domain = "other.auth0.com"  # type: ignore[misc]

    def test_secret_not_in_repr(self, base_config: ApiClientConfig) -> None:
        assert base_config.client_secret.get_secret_value() not in repr(base_config)


class TestOptions:
    def test_get(self) -> None:
        config = create_test_config(app_token="static-token")
        assert config.get("domain") == "test.auth0.com"
        assert config.get("client_id") == "test-client-id"
        assert config.get("client_secret") == config.client_secret.get_secret_value()
        assert config.get("auth0_app_token") == "static-token"

    def test_get_missing_static_token(self, base_config: ApiClientConfig) -> None:
        assert base_config.get("auth0_app_token") is None

    def test_get_unknown(self, base_config: ApiClientConfig) -> None:
        with pytest.raises(InvalidConfigError):
            base_config.get("nope")  # type: ignore[arg-type]

    def test_derived_urls(self, base_config: ApiClientConfig) -> None:
        assert base_config.audience == "https://test.auth0.com/api/v2/"
        assert base_config.jwks_uri == "https://test.auth0.com/.well-known/jwks.json"
        assert base_config.credentials.domain == "test.auth0.com"


class TestSecretAsKey:
    def test_hs256_plain(self) -> None:
        config = create_test_config(client_secret="plain-secret")
        assert config.get_client_secret_as_key() == b"plain-secret"

    def test_hs256_base64(self) -> None:
        raw = b"\x00binary-secret\xff"
        encoded = base64.urlsafe_b64encode(raw).decode().rstrip("=")
        config = create_test_config(client_secret=encoded, client_secret_base64_encoded=True)
        assert config.get_client_secret_as_key() == raw

    def test_hs256_invalid_base64(self) -> None:
        config = create_test_config(client_secret="a", client_secret_base64_encoded=True)
        with pytest.raises(InvalidConfigError):
            config.get_client_secret_as_key()

    def test_rs256_returns_shared_jwks_cache(self) -> None:
        config = create_test_config(signing_algorithm="RS256")
        key = config.get_client_secret_as_key()
        assert isinstance(key, JWKSCache)
        assert key is config.get_client_secret_as_key()
        assert key.jwks_uri == config.jwks_uri


class TestFactories:
    def test_with_overrides_keeps_secrets(self) -> None:
        config = create_test_config(app_token="static-token")
        updated = config.with_overrides(domain="other.auth0.com")
        assert updated.domain == "other.auth0.com"
        assert updated.client_secret == config.client_secret
        assert updated.get("auth0_app_token") == "static-token"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MGMT_API_DOMAIN", "env.auth0.com")
        monkeypatch.setenv("MGMT_API_CLIENT_ID", "env-id")
        monkeypatch.setenv("MGMT_API_CLIENT_SECRET", "env-secret")
        monkeypatch.setenv("MGMT_API_SIGNING_ALGORITHM", "HS256")

        config = ApiClientConfig.from_env()

        assert config.domain == "env.auth0.com"
        assert config.signing_algorithm == "HS256"
        assert config.app_token is None

    def test_from_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MGMT_API_DOMAIN", raising=False)
        with pytest.raises(InvalidConfigError) as exc_info:
            ApiClientConfig.from_env()
        assert exc_info.value.details == {"field": "domain"}
