"""Fluent request builder.

Accumulates path, headers and body for one request against
``https://{domain}/{path}``. The verb methods finalize the request, hand it
to the injected send callable and keep the raw response.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Self

from ..models import Credentials, HttpMethod, PendingRequest, RawResponse

JSON_CONTENT_TYPE = "application/json"

SendFn = Callable[[PendingRequest], RawResponse]


def clean_path(path: str) -> str:
    """Remove one leading slash, if there is one."""
    if path.startswith("/"):
        return path[1:]
    return path


class RequestBuilder:
    """Mutable builder for a single API request.

    Every chainable method mutates this builder and returns it.
    """

    def __init__(
        self,
        credentials: Credentials,
        send: SendFn,
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.credentials = credentials
        self._send = send
        self.path = ""
        self.headers: dict[str, str] = dict(headers or {})
        self.body: dict[str, Any] = {}
        self.response: RawResponse | None = None

    def set_path(self, path: str) -> Self:
        self.path = clean_path(path)
        return self

    def add_header(self, name: str, value: str) -> Self:
        self.headers[name] = value
        return self

    def add_body(self, key: str, value: Any) -> Self:
        self.body[key] = value
        return self

    def send_audience(self) -> Self:
        """Include the Management API audience in the body."""
        return self.add_body("audience", f"https://{self.credentials.domain}/api/v2/")

    def send_client_id(self) -> Self:
        return self.add_body("client_id", self.credentials.client_id)

    def send_client_secret(self) -> Self:
        return self.add_body(
            "client_secret", self.credentials.client_secret.get_secret_value()
        )

    def build_url(self) -> str:
        return f"https://{self.credentials.domain}/{self.path}"

    def build(self, method: HttpMethod | str) -> PendingRequest:
        """Finalize the accumulated state into a request.

        POST and PATCH always carry a JSON content type.
        """
        method = HttpMethod(method)
        if method in (HttpMethod.POST, HttpMethod.PATCH):
            self.add_header("Content-Type", JSON_CONTENT_TYPE)
        return PendingRequest(
            method=method,
            url=self.build_url(),
            path=self.path,
            headers=dict(self.headers),
            body=dict(self.body) if self.body else None,
        )

    def get(self) -> Self:
        return self._request(HttpMethod.GET)

    def post(self) -> Self:
        return self._request(HttpMethod.POST)

    def patch(self) -> Self:
        return self._request(HttpMethod.PATCH)

    def delete(self) -> Self:
        return self._request(HttpMethod.DELETE)

    def _request(self, method: HttpMethod) -> Self:
        request = self.build(method)
        self.response = self._send(request)
        return self
