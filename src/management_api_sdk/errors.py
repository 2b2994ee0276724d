"""Error classes for the Management API SDK.

Structured error hierarchy with error codes. These are raised only at the
edges of the SDK (configuration, token decoding, opt-in ``raise_for_error``);
API call failures are otherwise recorded as values in the error sink.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the Management API SDK."""

    # Transport errors (1xxx)
    TRANSPORT_ERROR = "NET_1001"

    # Token errors (2xxx)
    TOKEN_UNAVAILABLE = "AUTH_2001"
    TOKEN_DECODE_FAILED = "AUTH_2002"
    MISSING_SCOPE = "AUTH_2003"

    # API errors (3xxx)
    STRUCTURED_API_ERROR = "API_3001"
    UNSTRUCTURED_API_ERROR = "API_3002"

    # Configuration errors (4xxx)
    INVALID_CONFIG = "CFG_4001"


class DecodeErrorKind(StrEnum):
    """Why a bearer token could not be decoded. Diagnostic only."""

    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"
    INVALID_CLAIMS = "invalid_claims"
    KEY_UNAVAILABLE = "key_unavailable"


class ApiClientError(Exception):
    """Base error for the Management API SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TransportError(ApiClientError):
    """Network, DNS or TLS failure; no status code was obtained."""

    def __init__(
        self,
        message: str = "HTTP request failed",
        *,
        cause: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TRANSPORT_ERROR,
            details={"cause": cause} if cause else None,
        )


class TokenUnavailableError(ApiClientError):
    """No decodable token from the cache, the static token or a grant."""

    def __init__(self, message: str = "No usable API token available") -> None:
        super().__init__(message, ErrorCode.TOKEN_UNAVAILABLE, status_code=401)


class TokenDecodeError(ApiClientError):
    """A bearer token failed verification or decoding."""

    def __init__(
        self,
        message: str,
        kind: DecodeErrorKind,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TOKEN_DECODE_FAILED,
            status_code=401,
            details={"kind": kind.value},
        )
        self.kind = kind


class MissingScopeError(ApiClientError):
    """The token decodes but does not carry the required scope."""

    def __init__(self, scope: str, message: str | None = None) -> None:
        super().__init__(
            message or f"API token does not include the scope {scope}.",
            ErrorCode.MISSING_SCOPE,
            status_code=403,
            details={"scope": scope},
        )
        self.scope = scope


class StructuredApiError(ApiClientError):
    """The remote API returned a recognizable error envelope."""

    def __init__(
        self,
        message: str,
        *,
        api_code: str | int,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.STRUCTURED_API_ERROR,
            status_code=status_code,
            details={"api_code": api_code},
        )
        self.api_code = api_code


class UnstructuredApiError(ApiClientError):
    """Non-success status with an unparseable or unrecognized body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.UNSTRUCTURED_API_ERROR,
            status_code=status_code,
        )


class InvalidConfigError(ApiClientError):
    """Invalid SDK configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )
