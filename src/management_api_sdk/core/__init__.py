"""Core components for the Management API SDK.

Token decoding, request building and response classification shared by
the client and every API operation.
"""

from __future__ import annotations

from .classifier import ResponseClassifier
from .errors import ErrorFactory
from .request_builder import RequestBuilder
from .token_decoder import TokenDecoder, decode_token

__all__ = [
    "ErrorFactory",
    "RequestBuilder",
    "ResponseClassifier",
    "TokenDecoder",
    "decode_token",
]
