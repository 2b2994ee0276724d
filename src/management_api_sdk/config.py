"""Configuration for the Management API SDK.

Uses Pydantic v2 for validation. ``ApiClientConfig`` is also the options
source the client reads its credentials, static token and verification
key from.
"""

from __future__ import annotations

import base64
import binascii
from functools import cached_property
from typing import TYPE_CHECKING, Annotated, Any, Literal, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
)

from .errors import InvalidConfigError
from .models import Credentials

if TYPE_CHECKING:
    from .jwks import JWKSCache

OptionKey = Literal["domain", "client_id", "client_secret", "auth0_app_token"]


class CacheConfig(BaseModel):
    """Token cache namespacing."""

    model_config = ConfigDict(frozen=True)

    group: str = Field(default="management_api", min_length=1)
    token_key: str = Field(default="api_token", min_length=1)
    jwks_ttl: Annotated[int, Field(gt=0)] = 3600  # 1 hour


class TelemetryConfig(BaseModel):
    """Logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "management-api-sdk"
    log_level: str = "INFO"
    send_client_info: bool = True


class ApiClientConfig(BaseModel):
    """Main configuration for the Management API SDK."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    # Required
    domain: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr

    # Token verification
    client_secret_base64_encoded: bool = False
    signing_algorithm: Literal["RS256", "HS256"] = "RS256"
    verify_audience: bool = False
    app_token: SecretStr | None = None
    leeway: Annotated[int, Field(ge=0, le=300)] = 0

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0

    # Sub-configurations
    cache: CacheConfig = Field(default_factory=CacheConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        """Domain must be a bare host name; the scheme is always https."""
        v = v.strip()
        if "://" in v or "/" in v or " " in v:
            msg = f"domain must be a host name without scheme or path: {v!r}"
            raise ValueError(msg)
        return v

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            domain=self.domain,
            client_id=self.client_id,
            client_secret=self.client_secret,
        )

    @property
    def audience(self) -> str:
        """Management API audience for this tenant."""
        return f"https://{self.domain}/api/v2/"

    @property
    def jwks_uri(self) -> str:
        return f"https://{self.domain}/.well-known/jwks.json"

    @cached_property
    def jwks_cache(self) -> JWKSCache:
        """Signing keys of this tenant, fetched lazily."""
        from .jwks import JWKSCache

        return JWKSCache(
            self.jwks_uri,
            ttl_seconds=self.cache.jwks_ttl,
            http_timeout=self.connect_timeout,
        )

    def get(self, key: OptionKey) -> str | None:
        """Read a plugin-style option by name."""
        if key == "domain":
            return self.domain
        if key == "client_id":
            return self.client_id
        if key == "client_secret":
            return self.client_secret.get_secret_value()
        if key == "auth0_app_token":
            return self.app_token.get_secret_value() if self.app_token else None
        raise InvalidConfigError(f"Unknown option: {key}", field=key)

    def get_client_secret_as_key(self) -> bytes | JWKSCache:
        """Key material used to verify API tokens.

        HS256 tokens are verified with the client secret (base64-decoded
        when flagged). RS256 tokens are verified against the tenant JWKS.
        """
        if self.signing_algorithm == "RS256":
            return self.jwks_cache

        secret = self.client_secret.get_secret_value()
        if not self.client_secret_base64_encoded:
            return secret.encode()
        try:
            return base64.urlsafe_b64decode(secret + "=" * (-len(secret) % 4))
        except (binascii.Error, ValueError) as e:
            raise InvalidConfigError(
                "client_secret is not valid base64", field="client_secret"
            ) from e

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data["client_secret"] = self.client_secret.get_secret_value()
        if self.app_token is not None:
            data["app_token"] = self.app_token.get_secret_value()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "MGMT_API_") -> Self:
        """Create config from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        for required in ("DOMAIN", "CLIENT_ID", "CLIENT_SECRET"):
            if not get_env(required):
                raise InvalidConfigError(
                    f"{prefix}{required} environment variable is required",
                    field=required.lower(),
                )

        return cls(
            domain=get_env("DOMAIN"),
            client_id=get_env("CLIENT_ID"),
            client_secret=get_env("CLIENT_SECRET"),
            app_token=get_env("APP_TOKEN") or None,
            signing_algorithm=get_env("SIGNING_ALGORITHM", "RS256"),
            client_secret_base64_encoded=get_env("CLIENT_SECRET_BASE64", "0")
            in ("1", "true", "yes"),
            timeout=float(get_env("TIMEOUT", "30.0")),
        )
