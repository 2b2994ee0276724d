"""Response classification.

Turns a ``RawResponse`` into either success (``None``) or a
``ClassifiedError``. The checks run in a fixed order: transport failure,
success status, ``statusCode`` envelope, ``error`` envelope, anything else.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..models import ClassifiedError, ErrorOrigin, RawResponse

GENERIC_MESSAGE = "Error returned"

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


def sanitize_text(value: Any) -> str:
    """Strip markup and collapse whitespace in a remote-supplied string."""
    text = _TAG_RE.sub("", str(value))
    return _SPACE_RE.sub(" ", text).strip()


def parse_json_object(body: str | None) -> dict[str, Any] | None:
    """Decode ``body`` as a JSON object, or None if it is not one."""
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


class ResponseClassifier:
    """Stateless classifier for raw transport results."""

    def classify(
        self,
        raw: RawResponse,
        success_code: int = 200,
    ) -> ClassifiedError | None:
        """Classify ``raw``.

        Args:
            raw: Transport result.
            success_code: Status code that counts as success.

        Returns:
            None on success, otherwise the classified error.
        """
        if raw.is_transport_error:
            return ClassifiedError(
                origin=ErrorOrigin.TRANSPORT,
                code=raw.error_code or "http_request_failed",
                message=raw.error_message or "HTTP request failed",
            )

        if raw.status_code == success_code:
            return None

        payload = parse_json_object(raw.body)

        if payload is not None and payload.get("statusCode") is not None:
            message = GENERIC_MESSAGE
            if payload.get("message") is not None:
                message += " - " + sanitize_text(payload["message"])
            if payload.get("errorCode") is not None:
                message += " [" + sanitize_text(payload["errorCode"]) + "]"
            return ClassifiedError(
                origin=ErrorOrigin.STRUCTURED_PAYLOAD,
                code=_scalar_code(payload["statusCode"]),
                message=message,
                status_code=raw.status_code,
            )

        if payload is not None and payload.get("error") is not None:
            message = GENERIC_MESSAGE
            if payload.get("error_description") is not None:
                message += " - " + sanitize_text(payload["error_description"])
            return ClassifiedError(
                origin=ErrorOrigin.STRUCTURED_PAYLOAD,
                code=_scalar_code(payload["error"]),
                message=message,
                status_code=raw.status_code,
            )

        return ClassifiedError(
            origin=ErrorOrigin.UNSTRUCTURED_PAYLOAD,
            code=None,
            message=raw.body or "",
            status_code=raw.status_code,
        )


def _scalar_code(value: Any) -> str | int:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return sanitize_text(value)
    return value
