"""Centralized error factory for the Management API SDK.

Converts classified errors and low-level exceptions into SDK exceptions
for callers that want to raise instead of inspecting the error sink.
"""

from __future__ import annotations

import httpx

from ..errors import (
    ApiClientError,
    MissingScopeError,
    StructuredApiError,
    TokenUnavailableError,
    TransportError,
    UnstructuredApiError,
)
from ..models import ClassifiedError, ErrorOrigin


class ErrorFactory:
    """Consistent error creation across SDK components."""

    @staticmethod
    def from_classified(error: ClassifiedError) -> ApiClientError:
        """Create the SDK exception matching a classified error.

        Args:
            error: Classified error value.

        Returns:
            Appropriate ApiClientError subclass.
        """
        if error.origin is ErrorOrigin.TRANSPORT:
            return TransportError(error.message, cause=str(error.code))

        if error.origin is ErrorOrigin.TOKEN_UNAVAILABLE:
            return TokenUnavailableError(error.message)

        if error.origin is ErrorOrigin.AUTH_SCOPE:
            return MissingScopeError(str(error.code), error.message)

        if error.origin is ErrorOrigin.STRUCTURED_PAYLOAD:
            return StructuredApiError(
                error.message,
                api_code=error.code if error.code is not None else "",
                status_code=error.status_code,
            )

        return UnstructuredApiError(error.message, status_code=error.status_code)

    @staticmethod
    def from_exception(exc: Exception) -> ApiClientError:
        """Create SDK error from exception.

        Args:
            exc: Original exception.

        Returns:
            Appropriate ApiClientError subclass.
        """
        if isinstance(exc, ApiClientError):
            return exc

        if isinstance(exc, httpx.TimeoutException):
            return TransportError(f"Request timed out: {exc}", cause=type(exc).__name__)

        if isinstance(exc, httpx.ConnectError):
            return TransportError(f"Connection failed: {exc}", cause=type(exc).__name__)

        if isinstance(exc, httpx.HTTPError):
            return TransportError(f"HTTP error: {exc}", cause=type(exc).__name__)

        return TransportError(f"Unexpected error: {exc}", cause=type(exc).__name__)
