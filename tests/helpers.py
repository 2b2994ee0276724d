"""Shared helpers for SDK tests.

Token signing, a scripted in-memory transport and client construction.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any

import jwt

from management_api_sdk.cache import MemoryTokenCache
from management_api_sdk.client import ApiClient
from management_api_sdk.config import ApiClientConfig
from management_api_sdk.models import PendingRequest, RawResponse
from management_api_sdk.sink import ErrorLog

DOMAIN = "test.auth0.com"
CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret-0123456789-abcdefghij"
AUDIENCE = f"https://{DOMAIN}/api/v2/"
TOKEN_URL = f"https://{DOMAIN}/oauth/token"


def create_test_config(**overrides: Any) -> ApiClientConfig:
    """HS256 configuration so tests can sign tokens with the client secret."""
    data: dict[str, Any] = {
        "domain": DOMAIN,
        "client_id": CLIENT_ID,
        "client_secret": CLIENT_SECRET,
        "signing_algorithm": "HS256",
    }
    data.update(overrides)
    return ApiClientConfig(**data)


def make_token(
    scope: str | None = "read:users update:users",
    *,
    expires_in: int = 3600,
    not_before: int | None = None,
    secret: str = CLIENT_SECRET,
    audience: str | None = AUDIENCE,
    **claims: Any,
) -> str:
    """Sign a Management API token with HS256."""
    now = int(time.time())
    payload: dict[str, Any] = {
        "iss": f"https://{DOMAIN}/",
        "sub": f"{CLIENT_ID}@clients",
        "iat": now,
        "exp": now + expires_in,
    }
    if audience is not None:
        payload["aud"] = audience
    if scope is not None:
        payload["scope"] = scope
    if not_before is not None:
        payload["nbf"] = now + not_before
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def json_response(status_code: int, body: Any) -> RawResponse:
    return RawResponse(status_code=status_code, body=json.dumps(body))


def token_response(token: str) -> RawResponse:
    return json_response(
        200,
        {"access_token": token, "token_type": "Bearer", "expires_in": 86400},
    )


class FakeTransport:
    """Transport answering from a queue of scripted responses.

    Each entry is either a ``RawResponse`` or a callable taking the sent
    request. Sent requests are kept in ``requests``.
    """

    def __init__(
        self,
        *responses: RawResponse | Callable[[PendingRequest], RawResponse],
    ) -> None:
        self._responses = list(responses)
        self.requests: list[PendingRequest] = []

    def queue(self, *responses: RawResponse | Callable[[PendingRequest], RawResponse]) -> None:
        self._responses.extend(responses)

    def execute(
        self,
        url: str,
        method: str,
        headers: dict[str, str],
        body: str | None,
    ) -> RawResponse:
        request = PendingRequest(
            method=method,
            url=url,
            path=url.split("/", 3)[3],
            headers=headers,
            body=json.loads(body) if body else None,
        )
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self._responses.pop(0)
        if callable(response):
            return response(request)
        return response

    @property
    def grant_requests(self) -> list[PendingRequest]:
        return [r for r in self.requests if r.url == TOKEN_URL]


def build_client(
    transport: FakeTransport,
    *,
    config: ApiClientConfig | None = None,
    cache: MemoryTokenCache | None = None,
    error_log: ErrorLog | None = None,
) -> ApiClient:
    """Client with a grantor, isolated cache and error log."""
    return ApiClient.from_config(
        config or create_test_config(),
        transport=transport,
        cache=cache if cache is not None else MemoryTokenCache(),
        error_sink=error_log if error_log is not None else ErrorLog(),
    )
