"""Pydantic models for the Management API SDK.

Uses Pydantic v2 frozen models for the values that cross component
boundaries: credentials, decoded token claims, built requests, raw
transport results and classified errors.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class HttpMethod(StrEnum):
    """HTTP verbs the request builder can emit."""

    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


class ErrorOrigin(StrEnum):
    """Layer a classified error came from."""

    TRANSPORT = "transport"
    TOKEN_UNAVAILABLE = "token_unavailable"
    AUTH_SCOPE = "auth_scope"
    STRUCTURED_PAYLOAD = "structured_payload"
    UNSTRUCTURED_PAYLOAD = "unstructured_payload"


class Credentials(BaseModel):
    """Tenant domain and application credentials."""

    model_config = ConfigDict(frozen=True)

    domain: str = Field(..., min_length=1)
    client_id: str
    client_secret: SecretStr


class DecodedClaims(BaseModel):
    """Verified JWT claims of a bearer token."""

    model_config = ConfigDict(frozen=True, extra="allow")

    scope: str | None = None
    exp: int | float | None = Field(default=None, description="Expiration time (Unix timestamp)")
    nbf: int | float | None = Field(default=None, description="Not before time")
    iat: int | float | None = None
    sub: str | None = None
    iss: str | None = None
    aud: str | list[str] | None = None

    @property
    def scopes(self) -> frozenset[str]:
        """Granted scopes; empty when the claim is missing or blank."""
        if not self.scope:
            return frozenset()
        return frozenset(self.scope.split())

    def has_scope(self, scope: str) -> bool:
        """Check whether ``scope`` is one of the granted scopes."""
        return scope in self.scopes


class BearerToken(BaseModel):
    """A raw access token and, once verified, its claims."""

    model_config = ConfigDict(frozen=True)

    raw: str
    decoded: DecodedClaims | None = None

    @property
    def usable(self) -> bool:
        return self.decoded is not None

    @property
    def authorization(self) -> str:
        return f"Bearer {self.raw}"


class PendingRequest(BaseModel):
    """A finalized request ready for the transport."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    url: str
    path: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: dict[str, Any] | None = None

    @property
    def content(self) -> str | None:
        """JSON-encoded body, or None when there is nothing to send."""
        if not self.body:
            return None
        return json.dumps(self.body)


class RawResponse(BaseModel):
    """Outcome of one transport round trip."""

    model_config = ConfigDict(frozen=True)

    is_transport_error: bool = False
    status_code: int | None = None
    body: str | None = None
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def transport_failure(cls, code: str, message: str) -> Self:
        """Create the result of a request that never got a status code."""
        return cls(is_transport_error=True, error_code=code, error_message=message)


class ClassifiedError(BaseModel):
    """A failure reduced to its origin, a code and a readable message."""

    model_config = ConfigDict(frozen=True)

    origin: ErrorOrigin
    code: str | int | None = None
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message} ({self.code})"


class TokenResponse(BaseModel):
    """Client-credentials grant response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(..., min_length=1)
    token_type: str = Field(default="Bearer")
    expires_in: int | None = None
    scope: str | None = None
