"""Typed API errors raised by the client.

Every failure a call can end with is one of the subclasses below. The set is
closed: callers can dispatch on ``error.kind`` and be sure every case is
covered.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .base import GenAIClientError

MAX_FRAGMENT_LENGTH = 512


class ErrorKind(str, Enum):
    """Kinds of API errors."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    AUTH_FAILURE = "auth_failure"
    INVALID_REQUEST = "invalid_request"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    DECODE = "decode"
    SAFETY_BLOCKED = "safety_blocked"


RETRYABLE_KINDS = frozenset({ErrorKind.NETWORK, ErrorKind.TIMEOUT, ErrorKind.SERVER_ERROR, ErrorKind.RATE_LIMITED})


def truncate_fragment(raw: bytes | str | None, limit: int = MAX_FRAGMENT_LENGTH) -> str:
    """Render a raw payload fragment as bounded text for diagnostics."""
    if raw is None:
        return ""
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class ApiError(GenAIClientError):
    """Base class for errors surfaced by API calls."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, self.kind.value.upper(), details)
        self.original_error = original_error

    @property
    def retryable(self) -> bool:
        """Whether re-issuing the same request may succeed."""
        return self.kind in RETRYABLE_KINDS

    def to_dict(self) -> dict[str, Any]:
        """Structured representation suitable for logging."""
        return {
            "kind": self.kind.value,
            "error_code": self.error_code,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }


class NetworkError(ApiError):
    """Connection, TLS or protocol failure before a complete response arrived."""

    kind = ErrorKind.NETWORK


class ApiTimeoutError(ApiError):
    """The request did not complete within the configured timeout."""

    kind = ErrorKind.TIMEOUT


class AuthFailureError(ApiError):
    """Missing credential, or the service rejected the credential."""

    kind = ErrorKind.AUTH_FAILURE


class InvalidRequestError(ApiError):
    """The request is malformed or violates a documented constraint."""

    kind = ErrorKind.INVALID_REQUEST

    def __init__(self, field: str | None, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Invalid request: {field}: {reason}" if field else f"Invalid request: {reason}"
        super().__init__(message, {"field": field, "reason": reason, **(details or {})})
        self.field = field
        self.reason = reason


class RateLimitedError(ApiError):
    """The service throttled the request."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str, retry_after: float | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, {"retry_after": retry_after, **(details or {})})
        self.retry_after = retry_after


class ServerError(ApiError):
    """The service answered with a 5xx status."""

    kind = ErrorKind.SERVER_ERROR

    def __init__(self, status_code: int, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message or f"Server error: HTTP {status_code}", {"status_code": status_code, **(details or {})})
        self.status_code = status_code


class DecodeError(ApiError):
    """A payload could not be interpreted."""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, fragment: bytes | str | None = None, original_error: Exception | None = None) -> None:
        bounded = truncate_fragment(fragment)
        super().__init__(message, {"fragment": bounded}, original_error)
        self.fragment = bounded


class SafetyBlockedError(ApiError):
    """The service withheld all content for safety reasons."""

    kind = ErrorKind.SAFETY_BLOCKED

    def __init__(self, block_reason: str | None = None, message: str | None = None) -> None:
        text = message or f"Prompt blocked by the service: {block_reason or 'unspecified'}"
        super().__init__(text, {"block_reason": block_reason})
        self.block_reason = block_reason
