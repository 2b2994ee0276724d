"""Management API Python SDK."""

from .cache import MemoryTokenCache, TokenCache
from .client import ApiClient
from .config import ApiClientConfig, CacheConfig, TelemetryConfig
from .errors import (
    ApiClientError,
    InvalidConfigError,
    MissingScopeError,
    StructuredApiError,
    TokenDecodeError,
    TokenUnavailableError,
    TransportError,
    UnstructuredApiError,
)
from .models import ClassifiedError, DecodedClaims, ErrorOrigin, RawResponse
from .operations import (
    ApiOperation,
    ChangeEmail,
    ChangePassword,
    ClientCredentialsGrantor,
    DeleteUserMfa,
    GetUser,
    ResendVerificationEmail,
)
from .sink import ErrorLog, ErrorSink
from .transport import HttpxTransport, Transport

__all__ = [
    "ApiClient",
    "ApiClientConfig",
    "ApiClientError",
    "ApiOperation",
    "CacheConfig",
    "ChangeEmail",
    "ChangePassword",
    "ClassifiedError",
    "ClientCredentialsGrantor",
    "DecodedClaims",
    "DeleteUserMfa",
    "ErrorLog",
    "ErrorOrigin",
    "ErrorSink",
    "GetUser",
    "HttpxTransport",
    "InvalidConfigError",
    "MemoryTokenCache",
    "MissingScopeError",
    "RawResponse",
    "ResendVerificationEmail",
    "StructuredApiError",
    "TelemetryConfig",
    "TokenCache",
    "TokenDecodeError",
    "TokenUnavailableError",
    "TransportError",
    "UnstructuredApiError",
]

__version__ = "0.1.0"
