"""HTTP transport for the Management API SDK.

The transport performs exactly one round trip per call and reports
network-level failures as a ``RawResponse`` flagged as a transport error;
it never raises for them. Retries and backoff are left to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from .models import RawResponse
from .telemetry import SDK_NAME, SDK_VERSION, get_logger, trace_operation

if TYPE_CHECKING:
    from .config import ApiClientConfig


@runtime_checkable
class Transport(Protocol):
    """Executes one HTTP request."""

    def execute(
        self,
        url: str,
        method: str,
        headers: dict[str, str],
        body: str | None,
    ) -> RawResponse:
        ...


def create_http_client(config: ApiClientConfig) -> httpx.Client:
    """Create configured sync HTTP client.

    Args:
        config: SDK configuration.

    Returns:
        Configured httpx.Client.
    """
    return httpx.Client(
        timeout=httpx.Timeout(
            connect=config.connect_timeout,
            read=config.timeout,
            write=config.timeout,
            pool=config.timeout,
        ),
        headers={
            "User-Agent": f"{SDK_NAME}/{SDK_VERSION} Python",
            "Accept": "application/json",
        },
        follow_redirects=False,
    )


def transport_error_code(exc: httpx.HTTPError) -> str:
    """Short machine-readable code for an httpx failure."""
    if isinstance(exc, httpx.TimeoutException):
        return "http_request_timeout"
    if isinstance(exc, httpx.ConnectError):
        return "http_connect_failed"
    return "http_request_failed"


class HttpxTransport:
    """Transport backed by an ``httpx.Client``."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client
        self._logger = get_logger()

    @classmethod
    def from_config(cls, config: ApiClientConfig) -> HttpxTransport:
        return cls(create_http_client(config))

    def execute(
        self,
        url: str,
        method: str,
        headers: dict[str, str],
        body: str | None,
    ) -> RawResponse:
        """Send the request and capture status and body.

        Args:
            url: Absolute request URL.
            method: HTTP method.
            headers: Request headers.
            body: Encoded request body, if any.

        Returns:
            The raw response, or a transport-error result.
        """
        with trace_operation(
            "http_request",
            attributes={"http.method": method, "http.url": url},
        ) as span:
            try:
                response = self._client.request(method, url, headers=headers, content=body)
            except httpx.HTTPError as e:
                code = transport_error_code(e)
                self._logger.warning("HTTP request failed", method=method, url=url, error=str(e))
                return RawResponse.transport_failure(code, str(e) or type(e).__name__)

            span.set_attribute("http.status_code", response.status_code)
            self._logger.debug(
                "HTTP request completed",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            return RawResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
