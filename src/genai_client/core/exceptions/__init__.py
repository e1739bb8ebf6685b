"""Exception hierarchy for the generative AI client.

All errors derive from ``GenAIClientError``. Errors produced by API calls
derive from ``ApiError`` and carry an ``ErrorKind`` tag.
"""

from .api import (
    ApiError,
    ApiTimeoutError,
    AuthFailureError,
    DecodeError,
    ErrorKind,
    InvalidRequestError,
    NetworkError,
    RateLimitedError,
    SafetyBlockedError,
    ServerError,
)
from .base import GenAIClientError

__all__ = [
    # Base exceptions
    "GenAIClientError",
    "ApiError",
    "ErrorKind",
    # API error kinds
    "NetworkError",
    "ApiTimeoutError",
    "AuthFailureError",
    "InvalidRequestError",
    "RateLimitedError",
    "ServerError",
    "DecodeError",
    "SafetyBlockedError",
]
