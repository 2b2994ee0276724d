"""JWKS caching for RS256 token verification.

Thread-safe signing-key cache with a configurable TTL. Keys are looked up
by the ``kid`` header of the token being verified.
"""

from __future__ import annotations

import threading
import time
from typing import Any

import httpx
import jwt

from .errors import DecodeErrorKind, TokenDecodeError
from .telemetry import get_logger


class JWKSCache:
    """Thread-safe JWKS cache with configurable TTL."""

    def __init__(
        self,
        jwks_uri: str,
        *,
        ttl_seconds: int = 3600,
        http_timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize JWKS cache.

        Args:
            jwks_uri: URI to fetch JWKS from.
            ttl_seconds: Cache TTL in seconds.
            http_timeout: HTTP request timeout.
            http_client: Optional client used for fetching (tests inject one).
        """
        self.jwks_uri = jwks_uri
        self.ttl_seconds = ttl_seconds
        self.http_timeout = http_timeout

        self._http_client = http_client
        self._keys: dict[str, jwt.PyJWK] = {}
        self._cache_time: float = 0
        self._lock = threading.RLock()

    def get_signing_key(self, token: str) -> Any:
        """Get the verification key for ``token``.

        Refreshes once when the token's ``kid`` is unknown, to pick up
        rotated keys.

        Raises:
            TokenDecodeError: If the key cannot be found or fetched.
        """
        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except jwt.exceptions.PyJWTError as e:
            raise TokenDecodeError(f"Invalid token header: {e}", DecodeErrorKind.MALFORMED) from e

        with self._lock:
            refreshed = self._should_refresh()
            if refreshed:
                self._refresh()

            key = self._find(kid)
            if key is None and not refreshed:
                self._refresh()
                key = self._find(kid)

            if key is None:
                raise TokenDecodeError(
                    f"Signing key {kid!r} not found in JWKS",
                    DecodeErrorKind.KEY_UNAVAILABLE,
                )
            return key.key

    def _find(self, kid: str | None) -> jwt.PyJWK | None:
        if kid is None:
            # Single-key sets may omit kid.
            if len(self._keys) == 1:
                return next(iter(self._keys.values()))
            return None
        return self._keys.get(kid)

    def _should_refresh(self) -> bool:
        """Check if cache should be refreshed."""
        if not self._keys:
            return True
        return time.time() - self._cache_time > self.ttl_seconds

    def _refresh(self) -> None:
        """Refresh JWKS from server."""
        try:
            if self._http_client is not None:
                response = self._http_client.get(self.jwks_uri)
            else:
                with httpx.Client(timeout=self.http_timeout) as client:
                    response = client.get(self.jwks_uri)
            response.raise_for_status()
            key_set = jwt.PyJWKSet.from_dict(response.json())
        except httpx.HTTPError as e:
            raise TokenDecodeError(
                f"Failed to fetch JWKS: {e}", DecodeErrorKind.KEY_UNAVAILABLE
            ) from e
        except (ValueError, jwt.exceptions.PyJWKSetError) as e:
            raise TokenDecodeError(
                f"Failed to parse JWKS: {e}", DecodeErrorKind.KEY_UNAVAILABLE
            ) from e

        self._keys = {key.key_id or "": key for key in key_set.keys}
        self._cache_time = time.time()
        get_logger().debug("JWKS refreshed", jwks_uri=self.jwks_uri, keys=len(self._keys))

    def invalidate(self) -> None:
        """Invalidate the cache, forcing refresh on next access."""
        with self._lock:
            self._keys = {}
            self._cache_time = 0

    @property
    def is_cached(self) -> bool:
        """Check if JWKS is currently cached."""
        with self._lock:
            return bool(self._keys) and not self._should_refresh()
