"""Bearer token verification and decoding.

Every failure surfaces as one ``TokenDecodeError`` whose ``kind`` says
what went wrong. Callers treat all kinds alike (the token is unusable);
the kind only feeds diagnostics.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import jwt
import pydantic

from ..errors import DecodeErrorKind, TokenDecodeError
from ..jwks import JWKSCache
from ..models import DecodedClaims

# Management API tokens are always RS256.
DEFAULT_ALGORITHMS = ("RS256",)


def _kind_for(exc: jwt.exceptions.PyJWTError) -> DecodeErrorKind:
    if isinstance(exc, jwt.exceptions.InvalidAlgorithmError):
        return DecodeErrorKind.UNSUPPORTED_ALGORITHM
    if isinstance(exc, jwt.exceptions.ExpiredSignatureError):
        return DecodeErrorKind.EXPIRED
    if isinstance(exc, jwt.exceptions.ImmatureSignatureError):
        return DecodeErrorKind.NOT_YET_VALID
    if isinstance(exc, jwt.exceptions.InvalidSignatureError):
        return DecodeErrorKind.INVALID_SIGNATURE
    if isinstance(
        exc,
        (
            jwt.exceptions.InvalidAudienceError,
            jwt.exceptions.InvalidIssuerError,
            jwt.exceptions.InvalidIssuedAtError,
            jwt.exceptions.MissingRequiredClaimError,
        ),
    ):
        return DecodeErrorKind.INVALID_CLAIMS
    if isinstance(exc, jwt.exceptions.InvalidKeyError):
        return DecodeErrorKind.KEY_UNAVAILABLE
    return DecodeErrorKind.MALFORMED


def decode_token(
    token: str,
    verification_key: Any,
    allowed_algorithms: Sequence[str],
    *,
    audience: str | None = None,
    leeway: int = 0,
) -> DecodedClaims:
    """Verify ``token`` and return its claims.

    Checks the signature, ``nbf`` and ``exp`` (and ``aud`` when an audience
    is given).

    Args:
        token: Encoded JWT.
        verification_key: Secret, public key, or a ``JWKSCache`` to look the
            key up in.
        allowed_algorithms: Algorithms the token may be signed with.
        audience: Expected audience.
        leeway: Clock skew tolerance in seconds.

    Raises:
        TokenDecodeError: If the token is unusable for any reason.
    """
    if not allowed_algorithms:
        raise TokenDecodeError(
            "No signing algorithm allowed", DecodeErrorKind.UNSUPPORTED_ALGORITHM
        )
    if not token:
        raise TokenDecodeError("Token is empty", DecodeErrorKind.MALFORMED)

    key = verification_key
    if isinstance(verification_key, JWKSCache):
        key = verification_key.get_signing_key(token)

    options: dict[str, Any] = {"verify_aud": audience is not None}
    try:
        decoded = jwt.decode(
            token,
            key,
            algorithms=list(allowed_algorithms),
            audience=audience,
            leeway=leeway,
            options=options,
        )
    except jwt.exceptions.PyJWTError as e:
        raise TokenDecodeError(f"Invalid token: {e}", _kind_for(e)) from e

    try:
        return DecodedClaims(**decoded)
    except pydantic.ValidationError as e:
        raise TokenDecodeError(
            f"Unexpected claim types: {e.error_count()} error(s)",
            DecodeErrorKind.INVALID_CLAIMS,
        ) from e


class TokenDecoder:
    """Decoder bound to one key source, algorithm list and audience."""

    def __init__(
        self,
        verification_key: Any,
        *,
        algorithms: Sequence[str] = DEFAULT_ALGORITHMS,
        audience: str | None = None,
        leeway: int = 0,
    ) -> None:
        self.verification_key = verification_key
        self.algorithms = tuple(algorithms)
        self.audience = audience
        self.leeway = leeway

    def decode(self, token: str) -> DecodedClaims:
        """Verify ``token``; see :func:`decode_token`."""
        return decode_token(
            token,
            self.verification_key,
            self.algorithms,
            audience=self.audience,
            leeway=self.leeway,
        )
