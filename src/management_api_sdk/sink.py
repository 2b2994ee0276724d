"""Error sinks.

Every classified failure and every token-resolution failure is handed to
an error sink as ``record(section, error)``. Recording never raises.
"""

from __future__ import annotations

import threading
from collections import deque
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from .errors import ApiClientError
from .models import ClassifiedError
from .telemetry import get_logger

ErrorLike = ClassifiedError | ApiClientError | Exception | str


@runtime_checkable
class ErrorSink(Protocol):
    """Fire-and-forget destination for diagnostics."""

    def record(self, section: str, error: ErrorLike) -> None:
        ...


class ErrorEntry(BaseModel):
    """One row of the error log."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    section: str
    code: str
    message: str
    count: int = 1

    def same_error(self, other: ErrorEntry) -> bool:
        return (
            self.section == other.section
            and self.code == other.code
            and self.message == other.message
        )


def _code_and_message(error: ErrorLike) -> tuple[str, str]:
    if isinstance(error, ClassifiedError):
        code = error.code if error.code is not None else "unknown_code"
        return str(code), error.message
    if isinstance(error, ApiClientError):
        return error.code, error.message
    if isinstance(error, Exception):
        return type(error).__name__, str(error)
    return "unknown_code", str(error)


class LoggingErrorSink:
    """Sink that only writes to the structured log."""

    def record(self, section: str, error: ErrorLike) -> None:
        code, message = _code_and_message(error)
        fields: dict[str, Any] = {"section": section, "code": code}
        if isinstance(error, ClassifiedError):
            fields["origin"] = error.origin.value
            fields["status_code"] = error.status_code
        get_logger().warning(message, **fields)


class ErrorLog(LoggingErrorSink):
    """Bounded in-memory error log.

    Keeps the newest ``limit`` entries, newest first. A record identical to
    the newest entry bumps its count and date instead of adding a row.
    """

    def __init__(self, limit: int = 30) -> None:
        self.limit = limit
        self._entries: deque[ErrorEntry] = deque(maxlen=limit)
        self._lock = threading.Lock()

    def record(self, section: str, error: ErrorLike) -> None:
        super().record(section, error)
        code, message = _code_and_message(error)
        entry = ErrorEntry(
            date=datetime.now(UTC),
            section=section,
            code=code,
            message=message,
        )
        with self._lock:
            if self._entries and self._entries[0].same_error(entry):
                previous = self._entries.popleft()
                entry = entry.model_copy(update={"count": previous.count + 1})
            self._entries.appendleft(entry)

    @property
    def entries(self) -> list[ErrorEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
