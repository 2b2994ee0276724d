"""Job operations of the Management API."""

from __future__ import annotations

from .base import ApiOperation


class ResendVerificationEmail(ApiOperation):
    """Queue a verification email for a user."""

    scope = "update:users"

    def call(self, user_id: str) -> bool:
        if not user_id:
            return False
        if not self.prepare():
            return False
        (
            self.api.builder.set_path("api/v2/jobs/verification-email")
            .add_body("user_id", user_id)
            .send_client_id()
            .post()
        )
        return self.handle_response(self.section)

    def handle_response(self, method: str) -> bool:
        if self.api.handle_transport_error(method):
            return False
        if self.api.handle_failed_response(method, 201):
            return False
        return True
