"""Classification of failed exchanges into typed API errors."""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

import httpx

from ...core.exceptions import (
    ApiError,
    ApiTimeoutError,
    AuthFailureError,
    DecodeError,
    InvalidRequestError,
    NetworkError,
    RateLimitedError,
    SafetyBlockedError,
    ServerError,
)
from ..http.transport import map_transport_fault

RETRY_INFO_TYPE = "type.googleapis.com/google.rpc.RetryInfo"
BAD_REQUEST_TYPE = "type.googleapis.com/google.rpc.BadRequest"

_DURATION = re.compile(r"^\s*(\d+(?:\.\d+)?)s\s*$")

# Canonical RPC status names mapped to the HTTP status they travel with
RPC_STATUS_CODES = {
    "INVALID_ARGUMENT": 400,
    "FAILED_PRECONDITION": 400,
    "OUT_OF_RANGE": 400,
    "UNAUTHENTICATED": 401,
    "PERMISSION_DENIED": 403,
    "NOT_FOUND": 404,
    "RESOURCE_EXHAUSTED": 429,
    "CANCELLED": 499,
    "INTERNAL": 500,
    "UNAVAILABLE": 503,
    "DEADLINE_EXCEEDED": 504,
}


def _load_document(body: bytes | str | dict[str, Any] | None) -> Any:
    if body is None or isinstance(body, dict):
        return body
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None


def _header(headers: dict[str, str] | None, name: str) -> str | None:
    for key, value in (headers or {}).items():
        if key.lower() == name:
            return value
    return None


def parse_retry_after(headers: dict[str, str] | None, error: dict[str, Any] | None) -> float | None:
    """Extract a retry hint in seconds from headers or a ``RetryInfo`` detail."""
    for detail in (error or {}).get("details", []) or []:
        if isinstance(detail, dict) and detail.get("@type") == RETRY_INFO_TYPE:
            match = _DURATION.match(str(detail.get("retryDelay", "")))
            if match:
                return float(match.group(1))

    value = _header(headers, "retry-after")
    if value is None:
        return None
    value = value.strip()
    if value.replace(".", "", 1).isdigit():
        return float(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return max(0.0, (when - datetime.now(UTC)).total_seconds())


def error_status(error: dict[str, Any]) -> int | None:
    """Resolve the HTTP status of an error object from its code or RPC status name."""
    code = error.get("code")
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return RPC_STATUS_CODES.get(str(error.get("status", "")).upper())


def _field_violation(error: dict[str, Any]) -> str | None:
    for detail in error.get("details", []) or []:
        if isinstance(detail, dict) and detail.get("@type") == BAD_REQUEST_TYPE:
            for violation in detail.get("fieldViolations", []) or []:
                if isinstance(violation, dict) and violation.get("field"):
                    return str(violation["field"])
    return None


def classify(
    status: int | None,
    body: bytes | str | dict[str, Any] | None = None,
    fault: Exception | None = None,
    headers: dict[str, str] | None = None,
) -> ApiError:
    """Turn the outcome of an exchange into a typed error.

    Args:
        status: HTTP status, or None when no response was obtained
        body: Raw or decoded response body, if any
        fault: Transport-level exception, if any
        headers: Response headers, used for retry hints

    Returns:
        The classified error. Never returns None: unrecognized outcomes
        become ``DecodeError`` carrying the raw fragment.
    """
    if fault is not None:
        if isinstance(fault, ApiError):
            return fault
        if isinstance(fault, httpx.HTTPError):
            return map_transport_fault(fault)
        return NetworkError(f"Transport failure: {fault}", original_error=fault)

    if status is None:
        return NetworkError("No response received")

    document = _load_document(body)
    error = document.get("error") if isinstance(document, dict) else None
    error = error if isinstance(error, dict) else None
    message = str(error.get("message")) if error and error.get("message") else None
    raw = body if not isinstance(body, dict) else json.dumps(body)

    if status in (401, 403):
        return AuthFailureError(message or f"Authentication failed: HTTP {status}", details={"status_code": status})

    if status == 429:
        retry_after = parse_retry_after(headers, error)
        return RateLimitedError(message or "Rate limit exceeded", retry_after=retry_after, details={"status_code": status})

    if status == 408:
        return ApiTimeoutError(message or "Request timed out on the server", details={"status_code": status})

    if 400 <= status < 500:
        if error is None:
            return DecodeError(f"Unrecognized error body for HTTP {status}", fragment=raw)
        field = _field_violation(error) or ("model" if status == 404 else None)
        return InvalidRequestError(
            field,
            message or f"HTTP {status}",
            details={"status_code": status, "status": error.get("status")},
        )

    if 500 <= status < 600:
        return ServerError(status, message, details={"status": error.get("status")} if error else None)

    if 200 <= status < 300 and isinstance(document, dict) and not document.get("candidates"):
        feedback = document.get("promptFeedback")
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            return SafetyBlockedError(feedback["blockReason"], feedback.get("blockReasonMessage"))

    return DecodeError(f"Unrecognized response for HTTP {status}", fragment=raw)
