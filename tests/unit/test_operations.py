"""Unit tests for the concrete Management API operations."""

from __future__ import annotations

import pytest

from management_api_sdk.cache import MemoryTokenCache
from management_api_sdk.models import RawResponse
from management_api_sdk.operations import (
    ChangeEmail,
    ChangePassword,
    ClientCredentialsGrantor,
    DeleteUserMfa,
    GetUser,
    ResendVerificationEmail,
)
from management_api_sdk.operations.users import PASSWORD_TOO_WEAK
from management_api_sdk.sink import ErrorLog

from tests.helpers import (
    CLIENT_ID,
    DOMAIN,
    FakeTransport,
    build_client,
    json_response,
    make_token,
)

USER_ID = "auth0|1234567890"
USER_URL = f"https://{DOMAIN}/api/v2/users/auth0%7C1234567890"


@pytest.fixture
def warm_cache() -> MemoryTokenCache:
    cache = MemoryTokenCache()
    cache.set("api_token", make_token("read:users update:users"))
    return cache


class TestGetUser:
    def test_success(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(json_response(200, {"user_id": USER_ID, "email": "a@example.com"}))
        result = GetUser(build_client(transport, cache=warm_cache)).call(USER_ID)

        assert result == {"user_id": USER_ID, "email": "a@example.com"}
        request = transport.requests[0]
        assert request.method == "GET"
        assert request.url == USER_URL
        assert request.headers["Authorization"].startswith("Bearer ")
        assert "Content-Type" not in request.headers

    def test_not_found(self, warm_cache: MemoryTokenCache) -> None:
        error_log = ErrorLog()
        transport = FakeTransport(
            json_response(404, {"statusCode": 404, "error": "Not Found", "message": "The user does not exist.", "errorCode": "inexistent_user"})
        )
        operation = GetUser(build_client(transport, cache=warm_cache, error_log=error_log))

        assert operation.call(USER_ID) is None
        assert error_log.entries[0].section == "GetUser.call"
        assert error_log.entries[0].message == "Error returned - The user does not exist. [inexistent_user]"
        assert operation.last_error is not None

    def test_empty_user_id(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport()
        assert GetUser(build_client(transport, cache=warm_cache)).call("") is None
        assert transport.requests == []

    def test_missing_scope_sends_nothing(self) -> None:
        cache = MemoryTokenCache()
        cache.set("api_token", make_token("update:users"))
        transport = FakeTransport()

        assert GetUser(build_client(transport, cache=cache)).call(USER_ID) is None
        assert transport.requests == []


class TestChangePassword:
    def test_success(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(json_response(200, {"user_id": USER_ID}))
        result = ChangePassword(build_client(transport, cache=warm_cache)).call(USER_ID, "n3w-Pass!")

        assert result is True
        request = transport.requests[0]
        assert request.method == "PATCH"
        assert request.url == USER_URL
        assert request.body == {"password": "n3w-Pass!"}
        assert request.headers["Content-Type"] == "application/json"

    def test_weak_password(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(
            json_response(400, {"statusCode": 400, "message": "PasswordStrengthError: Password is too weak"})
        )
        result = ChangePassword(build_client(transport, cache=warm_cache)).call(USER_ID, "123")
        assert result == PASSWORD_TOO_WEAK

    def test_other_bad_request(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(json_response(400, {"statusCode": 400, "message": "Bad"}))
        result = ChangePassword(build_client(transport, cache=warm_cache)).call(USER_ID, "pw")
        assert result is False

    def test_transport_failure(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(RawResponse.transport_failure("http_request_timeout", "timed out"))
        result = ChangePassword(build_client(transport, cache=warm_cache)).call(USER_ID, "pw")
        assert result is False

    def test_missing_arguments(self, warm_cache: MemoryTokenCache) -> None:
        operation = ChangePassword(build_client(FakeTransport(), cache=warm_cache))
        assert operation.call(USER_ID, "") is False
        assert operation.call("", "pw") is False


class TestChangeEmail:
    def test_success(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(json_response(200, {}))
        result = ChangeEmail(build_client(transport, cache=warm_cache)).call(
            USER_ID, "new@example.com", "Username-Password-Authentication"
        )

        assert result is True
        assert transport.requests[0].body == {
            "email": "new@example.com",
            "email_verified": False,
            "client_id": CLIENT_ID,
            "connection": "Username-Password-Authentication",
        }

    def test_failure(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(RawResponse(status_code=500, body="oops"))
        assert ChangeEmail(build_client(transport, cache=warm_cache)).call(USER_ID, "x@example.com") is False


class TestDeleteUserMfa:
    def test_success(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(RawResponse(status_code=204, body=""))
        result = DeleteUserMfa(build_client(transport, cache=warm_cache)).call(USER_ID)

        assert result == 1
        assert transport.requests[0].method == "DELETE"
        assert transport.requests[0].url == f"{USER_URL}/multifactor/google-authenticator"

    def test_ok_status_is_not_success(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(RawResponse(status_code=200, body=""))
        assert DeleteUserMfa(build_client(transport, cache=warm_cache)).call(USER_ID) == 0

    def test_empty_user(self, warm_cache: MemoryTokenCache) -> None:
        assert DeleteUserMfa(build_client(FakeTransport(), cache=warm_cache)).call("") == 0


class TestResendVerificationEmail:
    def test_success(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(json_response(201, {"status": "pending", "type": "verification_email"}))
        result = ResendVerificationEmail(build_client(transport, cache=warm_cache)).call(USER_ID)

        assert result is True
        request = transport.requests[0]
        assert request.url == f"https://{DOMAIN}/api/v2/jobs/verification-email"
        assert request.body == {"user_id": USER_ID, "client_id": CLIENT_ID}

    def test_failure(self, warm_cache: MemoryTokenCache) -> None:
        transport = FakeTransport(json_response(400, {"statusCode": 400}))
        assert ResendVerificationEmail(build_client(transport, cache=warm_cache)).call(USER_ID) is False


class TestClientCredentialsGrantor:
    def test_token_decoded_exposed(self) -> None:
        token = make_token("read:users")
        client = build_client(FakeTransport(json_response(200, {"access_token": token})))
        grantor = client.grantor
        assert isinstance(grantor, ClientCredentialsGrantor)

        result = grantor.call()

        assert result is not None
        assert result[0] == token
        assert grantor.token_decoded is not None
        assert grantor.token_decoded.has_scope("read:users")

    def test_failure_clears_decoded(self) -> None:
        transport = FakeTransport(
            json_response(200, {"access_token": make_token()}),
            RawResponse(status_code=500, body="down"),
        )
        grantor = build_client(transport).grantor
        assert isinstance(grantor, ClientCredentialsGrantor)

        grantor.call()
        assert grantor.call() is None
        assert grantor.token_decoded is None
