"""Configuration for the generative AI client."""

from .logging import LogFormat, LoggingConfig, LogLevel, setup_logging
from .settings import ApiVersion, ClientConfig, ClientSettings, RetryPolicy, load_client_config

__all__ = [
    "ApiVersion",
    "ClientConfig",
    "ClientSettings",
    "RetryPolicy",
    "load_client_config",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "setup_logging",
]
