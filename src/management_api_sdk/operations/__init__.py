"""Management API operations."""

from __future__ import annotations

from .base import ApiOperation
from .client_credentials import ClientCredentialsGrantor
from .jobs import ResendVerificationEmail
from .users import ChangeEmail, ChangePassword, DeleteUserMfa, GetUser

__all__ = [
    "ApiOperation",
    "ChangeEmail",
    "ChangePassword",
    "ClientCredentialsGrantor",
    "DeleteUserMfa",
    "GetUser",
    "ResendVerificationEmail",
]
