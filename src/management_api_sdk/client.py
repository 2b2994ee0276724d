"""Management API client.

``ApiClient`` is the shared state behind every API operation: credentials,
the request being built, bearer-token resolution and failure handling.
Operations compose one client and implement only ``call`` and
``handle_response``.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

from .cache import TokenCache, get_shared_cache
from .config import ApiClientConfig
from .core.classifier import ResponseClassifier
from .core.errors import ErrorFactory
from .core.request_builder import RequestBuilder
from .core.token_decoder import TokenDecoder
from .errors import TokenDecodeError
from .models import (
    BearerToken,
    ClassifiedError,
    DecodedClaims,
    ErrorOrigin,
    PendingRequest,
    RawResponse,
)
from .sink import ErrorLike, ErrorLog, ErrorSink
from .telemetry import build_client_info_header, get_logger, trace_operation
from .transport import HttpxTransport, Transport


class TokenGrantor(Protocol):
    """Source of freshly granted, already decoded tokens."""

    def call(self) -> tuple[str, DecodedClaims] | None:
        ...


class ApiClient:
    """Shared client state for one logical API call sequence."""

    def __init__(
        self,
        config: ApiClientConfig,
        *,
        transport: Transport,
        cache: TokenCache | None = None,
        error_sink: ErrorSink | None = None,
        grantor: TokenGrantor | None = None,
        decoder: TokenDecoder | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: SDK configuration and options source.
            transport: Executes HTTP requests.
            cache: Shared token cache (process-wide cache by default).
            error_sink: Receives every recorded failure.
            grantor: Client-credentials grantor used when no stored token
                decodes.
            decoder: Token decoder (built from config by default).
        """
        self.config = config
        self.credentials = config.credentials
        self.grantor = grantor
        self.error_sink: ErrorSink = error_sink if error_sink is not None else ErrorLog()
        self.token: BearerToken | None = None
        self.last_error: ClassifiedError | None = None

        self._transport = transport
        self._cache: TokenCache = (
            cache if cache is not None else get_shared_cache(config.cache.group)
        )
        self._decoder = decoder or TokenDecoder(
            config.get_client_secret_as_key(),
            algorithms=(config.signing_algorithm,),
            audience=config.audience if config.verify_audience else None,
            leeway=config.leeway,
        )
        self._classifier = ResponseClassifier()
        self._logger = get_logger()

        # Headers sent with every request.
        self._info_headers = (
            build_client_info_header() if config.telemetry.send_client_info else {}
        )
        self.builder = self._new_builder()

    @classmethod
    def from_config(
        cls,
        config: ApiClientConfig,
        *,
        transport: Transport | None = None,
        cache: TokenCache | None = None,
        error_sink: ErrorSink | None = None,
    ) -> ApiClient:
        """Create a client wired with a client-credentials grantor.

        The grantor runs on a sibling client sharing the same transport,
        cache and error sink.
        """
        from .operations.client_credentials import ClientCredentialsGrantor

        transport = transport or HttpxTransport.from_config(config)
        error_sink = error_sink if error_sink is not None else ErrorLog()
        grantor = ClientCredentialsGrantor(
            cls(config, transport=transport, cache=cache, error_sink=error_sink)
        )
        return cls(
            config,
            transport=transport,
            cache=cache,
            error_sink=error_sink,
            grantor=grantor,
        )

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if it holds resources."""
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()

    @property
    def cache(self) -> TokenCache:
        return self._cache

    @property
    def cache_key(self) -> str:
        return self.config.cache.token_key

    def _new_builder(self) -> RequestBuilder:
        return RequestBuilder(self.credentials, self._send, headers=self._info_headers)

    def reset(self) -> RequestBuilder:
        """Start a new request; bearer and body state are dropped."""
        self.builder = self._new_builder()
        self.token = None
        self.last_error = None
        return self.builder

    # Token resolution

    def set_bearer(self, scope: str) -> bool:
        """Resolve a token carrying ``scope`` and attach it to the request.

        Tries the cached token, then the configured static token, then a
        client-credentials grant. Never raises.

        Args:
            scope: Scope the token must grant.

        Returns:
            True if the Authorization header was set.
        """
        section = f"{type(self).__name__}.set_bearer"
        with trace_operation("set_bearer", attributes={"auth.scope": scope}):
            token = self.resolve_token()

            # No token to use; underlying causes were logged or recorded.
            if token is None or not token.usable:
                self._cache.delete(self.cache_key)
                self.record_error(
                    section,
                    ClassifiedError(
                        origin=ErrorOrigin.TOKEN_UNAVAILABLE,
                        code="token_unavailable",
                        message="No usable API token could be obtained.",
                    ),
                )
                return False

            if not token.decoded.has_scope(scope):
                self.record_error(
                    section,
                    ClassifiedError(
                        origin=ErrorOrigin.AUTH_SCOPE,
                        code=scope,
                        message=f"API token does not include the scope {scope}.",
                    ),
                )
                self._cache.delete(self.cache_key)
                return False

            self.token = token
            self.builder.add_header("Authorization", token.authorization)
            self._cache.set(self.cache_key, token.raw)
            return True

    def resolve_token(self) -> BearerToken | None:
        """Find the first decodable token: cache, static config, grant."""
        cached = self._cache.get(self.cache_key)
        if cached:
            claims = self._try_decode(cached, source="cache")
            if claims is not None:
                return BearerToken(raw=cached, decoded=claims)
            self._cache.delete(self.cache_key)

        static = self.config.get("auth0_app_token")
        if static:
            claims = self._try_decode(static, source="config")
            if claims is not None:
                return BearerToken(raw=static, decoded=claims)

        if self.grantor is not None:
            granted = self.grantor.call()
            if granted is not None:
                raw, claims = granted
                return BearerToken(raw=raw, decoded=claims)

        return None

    def _try_decode(self, raw: str, *, source: str) -> DecodedClaims | None:
        try:
            return self._decoder.decode(raw)
        except TokenDecodeError as e:
            self._logger.info(
                "Stored API token unusable",
                source=source,
                kind=e.kind.value,
                reason=e.message,
            )
            return None

    def decode_token(self, raw: str) -> DecodedClaims:
        """Decode ``raw`` with this client's key and algorithms.

        Raises:
            TokenDecodeError: If the token is unusable.
        """
        return self._decoder.decode(raw)

    # Transport

    def _send(self, request: PendingRequest) -> RawResponse:
        try:
            return self._transport.execute(
                request.url,
                request.method.value,
                request.headers,
                request.content,
            )
        except Exception as e:  # transports report failures as values
            error = ErrorFactory.from_exception(e)
            self._logger.error("Transport raised", url=request.url, error=error.message)
            return RawResponse.transport_failure("http_request_failed", error.message)

    @property
    def response(self) -> RawResponse | None:
        return self.builder.response

    @property
    def response_code(self) -> int | None:
        return self.response.status_code if self.response else None

    @property
    def response_body(self) -> str | None:
        return self.response.body if self.response else None

    def response_json(self) -> Any:
        """Decoded response body, or None when it is not JSON."""
        if not self.response_body:
            return None
        try:
            return json.loads(self.response_body)
        except ValueError:
            return None

    # Failure handling

    def record_error(self, section: str, error: ErrorLike) -> None:
        """Send ``error`` to the error sink; classified errors become ``last_error``."""
        if isinstance(error, ClassifiedError):
            self.last_error = error
        self.error_sink.record(section, error)

    def classify(self, success_code: int = 200) -> ClassifiedError | None:
        """Classify the last response; None means success."""
        if self.response is None:
            return ClassifiedError(
                origin=ErrorOrigin.TRANSPORT,
                code="no_request",
                message="No request has been sent.",
            )
        return self._classifier.classify(self.response, success_code)

    def handle_transport_error(self, method: str) -> bool:
        """Record a transport failure of the last request.

        Args:
            method: Name of the calling operation.

        Returns:
            True if there was a transport error.
        """
        if self.response is not None and not self.response.is_transport_error:
            return False
        self.record_error(method, self.classify())
        return True

    def handle_failed_response(self, method: str, success_code: int = 200) -> bool:
        """Record any non-success outcome of the last request.

        Args:
            method: Name of the calling operation.
            success_code: Status code representing success.

        Returns:
            True if there was an error.
        """
        error = self.classify(success_code)
        if error is None:
            return False
        self.record_error(method, error)
        return True

    def raise_for_error(self) -> None:
        """Raise the SDK exception for ``last_error``, if any."""
        if self.last_error is not None:
            raise ErrorFactory.from_classified(self.last_error)
