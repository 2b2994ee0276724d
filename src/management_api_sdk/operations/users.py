"""User operations of the Management API."""

from __future__ import annotations

from typing import Any

from ..core.classifier import parse_json_object
from .base import ApiOperation, user_path

PASSWORD_TOO_WEAK = "Password is too weak, please choose a different one."


class GetUser(ApiOperation):
    """Fetch a user profile."""

    scope = "read:users"

    def call(self, user_id: str) -> dict[str, Any] | None:
        if not user_id:
            return None
        if not self.prepare():
            return None
        self.api.builder.set_path(user_path(user_id)).get()
        return self.handle_response(self.section)

    def handle_response(self, method: str) -> dict[str, Any] | None:
        if self.api.handle_transport_error(method):
            return None
        if self.api.handle_failed_response(method):
            return None
        return parse_json_object(self.api.response_body)


class ChangePassword(ApiOperation):
    """Set a new password for a database-connection user."""

    scope = "update:users"

    def call(self, user_id: str, password: str) -> bool | str:
        """Change the password.

        Returns:
            True on success, False on failure, or a readable message when
            the password was rejected as too weak.
        """
        if not user_id or not password:
            return False
        if not self.prepare():
            return False
        self.api.builder.set_path(user_path(user_id)).add_body("password", password).patch()
        return self.handle_response(self.section)

    def handle_response(self, method: str) -> bool | str:
        if self.api.handle_transport_error(method):
            return False

        if self.api.response_code == 400:
            payload = parse_json_object(self.api.response_body) or {}
            if "PasswordStrengthError" in str(payload.get("message", "")):
                return PASSWORD_TOO_WEAK

        if self.api.handle_failed_response(method):
            return False
        return True


class ChangeEmail(ApiOperation):
    """Change a user's email address.

    The address is stored unverified; follow up with
    ``ResendVerificationEmail`` to have it confirmed.
    """

    scope = "update:users"

    def call(self, user_id: str, email: str, connection: str | None = None) -> bool:
        if not user_id or not email:
            return False
        if not self.prepare():
            return False
        builder = (
            self.api.builder.set_path(user_path(user_id))
            .add_body("email", email)
            .add_body("email_verified", False)
            .send_client_id()
        )
        if connection:
            builder.add_body("connection", connection)
        builder.patch()
        return self.handle_response(self.section)

    def handle_response(self, method: str) -> bool:
        if self.api.handle_transport_error(method):
            return False
        if self.api.handle_failed_response(method):
            return False
        return True


class DeleteUserMfa(ApiOperation):
    """Remove a user's MFA enrollment for one provider."""

    scope = "update:users"

    def call(self, user_id: str, provider: str = "google-authenticator") -> int:
        """Delete the enrollment.

        Returns:
            1 if the enrollment was deleted, 0 otherwise.
        """
        if not user_id or not provider:
            return 0
        if not self.prepare():
            return 0
        self.api.builder.set_path(user_path(user_id, "multifactor", provider)).delete()
        return self.handle_response(self.section)

    def handle_response(self, method: str) -> int:
        if self.api.handle_transport_error(method):
            return 0
        if self.api.handle_failed_response(method, 204):
            return 0
        return 1
