"""Client-credentials grant.

Exchanges the application's client id and secret for a Management API
token and verifies it before handing it back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pydantic

from ..errors import TokenDecodeError
from ..models import ClassifiedError, DecodedClaims, ErrorOrigin, TokenResponse
from ..telemetry import get_logger, trace_operation
from .base import ApiOperation

if TYPE_CHECKING:
    from ..client import ApiClient

TOKEN_PATH = "oauth/token"


class ClientCredentialsGrantor(ApiOperation):
    """Obtains a fresh API token; any failure ends the attempt."""

    def __init__(self, api: ApiClient) -> None:
        super().__init__(api)
        self._token_decoded: DecodedClaims | None = None

    @property
    def token_decoded(self) -> DecodedClaims | None:
        """Claims of the last granted token."""
        return self._token_decoded

    def call(self) -> tuple[str, DecodedClaims] | None:
        """Request a token.

        Returns:
            ``(raw_token, claims)``, or None if the grant or the decode failed.
        """
        self._token_decoded = None
        self.prepare()
        with trace_operation(
            "client_credentials_grant",
            attributes={"auth.domain": self.api.credentials.domain},
        ):
            (
                self.api.builder.set_path(TOKEN_PATH)
                .add_body("grant_type", "client_credentials")
                .send_audience()
                .send_client_id()
                .send_client_secret()
                .post()
            )
            return self.handle_response(self.section)

    def handle_response(self, method: str) -> tuple[str, DecodedClaims] | None:
        if self.api.handle_transport_error(method):
            return None

        if self.api.handle_failed_response(method):
            return None

        try:
            token = TokenResponse.model_validate(self.api.response_json())
        except pydantic.ValidationError:
            self.api.record_error(
                method,
                ClassifiedError(
                    origin=ErrorOrigin.UNSTRUCTURED_PAYLOAD,
                    code="missing_access_token",
                    message="No access_token returned.",
                    status_code=self.api.response_code,
                ),
            )
            return None

        try:
            claims = self.api.decode_token(token.access_token)
        except TokenDecodeError as e:
            self.api.record_error(method, e)
            return None

        self._token_decoded = claims
        get_logger().info("API token granted", scope=claims.scope, expires_at=claims.exp)
        return token.access_token, claims
