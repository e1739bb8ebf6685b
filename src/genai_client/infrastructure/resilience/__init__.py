"""Resilience patterns for API calls."""

from .retry import RetryController

__all__ = [
    "RetryController",
]
