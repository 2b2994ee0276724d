"""Base class for Management API operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar
from urllib.parse import quote

if TYPE_CHECKING:
    from ..client import ApiClient
    from ..models import ClassifiedError


def user_path(user_id: str, *segments: str) -> str:
    """Path of a user resource, with the id percent-encoded."""
    parts = ["api/v2/users", quote(user_id, safe="")]
    parts.extend(segments)
    return "/".join(parts)


class ApiOperation(ABC):
    """One Management API operation built on a shared ``ApiClient``.

    Subclasses assemble path, verb and body in ``call`` and decide what
    success means in ``handle_response``.
    """

    #: Scope the bearer token must carry; None for unauthenticated calls.
    scope: ClassVar[str | None] = None

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    @property
    def section(self) -> str:
        return f"{type(self).__name__}.call"

    @property
    def last_error(self) -> ClassifiedError | None:
        return self.api.last_error

    def prepare(self) -> bool:
        """Start a fresh request and attach a bearer token when required."""
        self.api.reset()
        if self.scope is None:
            return True
        return self.api.set_bearer(self.scope)

    @abstractmethod
    def call(self, *args: Any, **kwargs: Any) -> Any:
        """Send the request and return the operation's result."""

    @abstractmethod
    def handle_response(self, method: str) -> Any:
        """Interpret the response of the request sent by ``call``."""
