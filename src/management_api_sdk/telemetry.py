"""Logging, tracing and client-info header for the Management API SDK.

Structured logging via structlog and spans via OpenTelemetry. Credentials
and bearer tokens never reach either: log fields and span attributes with
a sensitive name are replaced by ``REDACTED``.
"""

from __future__ import annotations

import base64
import json
import logging
import platform
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .errors import ApiClientError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping, MutableMapping

    from .config import TelemetryConfig

SDK_NAME = "management-api-sdk"
SDK_VERSION = "0.1.0"
CLIENT_INFO_HEADER = "Auth0-Client"

SPAN_PREFIX = "management_api"
REDACTED = "[REDACTED]"
SENSITIVE_FIELDS = frozenset(
    {"authorization", "client_secret", "access_token", "token", "password", "app_token"}
)

_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    """Get or create the SDK tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SDK_NAME, SDK_VERSION)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    """Get or create the SDK logger."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(SDK_NAME)
    return _logger


def is_sensitive(name: str) -> bool:
    """Whether a log field or span attribute may carry a secret.

    Dotted attribute names are judged by their last segment, so
    ``http.request.header.authorization`` counts as sensitive.
    """
    return name.rsplit(".", 1)[-1].lower() in SENSITIVE_FIELDS


def redact_sensitive(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking sensitive fields."""
    for key in event_dict:
        if is_sensitive(key):
            event_dict[key] = REDACTED
    return event_dict


def configure_telemetry(config: TelemetryConfig) -> None:
    """Configure telemetry based on config.

    Disabling telemetry only silences tracing; the SDK keeps logging
    through whatever structlog configuration the host application set.

    Args:
        config: Telemetry configuration.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            redact_sensitive,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _log_level_to_int(config.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _tracer = trace.get_tracer(config.service_name, SDK_VERSION)
    _logger = structlog.get_logger(config.service_name).bind(sdk_version=SDK_VERSION)


def _log_level_to_int(level: str) -> int:
    """Numeric level for a level name; unknown names mean INFO."""
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def span_name(operation: str) -> str:
    return f"{SPAN_PREFIX}.{operation}"


def span_attributes(attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    """Span attributes with None values dropped and secrets masked."""
    result: dict[str, Any] = {"sdk.name": SDK_NAME, "sdk.version": SDK_VERSION}
    for key, value in (attributes or {}).items():
        if value is None:
            continue
        result[key] = REDACTED if is_sensitive(key) else value
    return result


@contextmanager
def trace_operation(
    operation: str,
    *,
    attributes: Mapping[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Trace one SDK operation in a ``management_api.<operation>`` span.

    SDK errors additionally tag the span with their error code.

    Args:
        operation: Operation name, e.g. ``set_bearer``.
        attributes: Optional span attributes.

    Yields:
        The active span.
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(
        span_name(operation), attributes=span_attributes(attributes)
    ) as span:
        try:
            yield span
        except Exception as e:
            if isinstance(e, ApiClientError):
                span.set_attribute("error.code", e.code)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise


def runtime_environment() -> dict[str, str]:
    """Versions reported in the client-info header."""
    return {"Python": platform.python_version(), "httpx": _httpx_version()}


def _httpx_version() -> str:
    import httpx

    return httpx.__version__


def build_client_info_header(
    version: str = SDK_VERSION,
    environment: dict[str, str] | None = None,
    *,
    name: str = SDK_NAME,
) -> dict[str, str]:
    """Build the telemetry header sent with every request.

    The value is base64-encoded JSON of the SDK name, version and runtime
    environment.
    """
    value = {
        "name": name,
        "version": version,
        "environment": environment if environment is not None else runtime_environment(),
    }
    encoded = base64.b64encode(json.dumps(value).encode()).decode("ascii")
    return {CLIENT_INFO_HEADER: encoded}


def decode_client_info_header(value: str) -> dict[str, Any]:
    """Inverse of :func:`build_client_info_header` for a single header value."""
    return json.loads(base64.b64decode(value))
