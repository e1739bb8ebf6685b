"""Logging configuration for applications using the client.

The library itself only emits structlog events; ``setup_logging`` is an
opt-in helper for host applications that want them rendered.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from structlog import configure, get_logger
from structlog.processors import JSONRenderer, add_log_level
from structlog.types import EventDict, WrappedLogger

SENSITIVE_FIELDS = ("api_key", "x-goog-api-key", "authorization", "token", "secret", "password")


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported logging output formats."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    format: LogFormat = Field(default=LogFormat.JSON, description="Output format for log messages")
    mask_sensitive_data: bool = Field(default=True, description="Mask credentials in log events")

    third_party_levels: dict[str, LogLevel] = Field(
        default_factory=lambda: {
            "httpx": LogLevel.WARNING,
            "httpcore": LogLevel.WARNING,
        },
        description="Logging levels for third-party libraries",
    )


def mask_sensitive_data(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential-like values anywhere in a log event."""

    def mask_value(key: Any, value: Any) -> Any:
        if isinstance(key, str) and any(field in key.lower() for field in SENSITIVE_FIELDS):
            return "***"
        if isinstance(value, dict):
            return {k: mask_value(k, v) for k, v in value.items()}
        if isinstance(value, list):
            return [mask_value("", item) for item in value]
        return value

    for key, value in event_dict.items():
        event_dict[key] = mask_value(key, value)
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add timestamp to log entry."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def text_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    """Render log entry as text."""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "info")
    event = event_dict.pop("event", "")

    msg_parts: list[str] = [str(timestamp), str(level).upper(), str(event)]
    if event_dict:
        extra = " ".join(f"{k}={v}" for k, v in event_dict.items())
        msg_parts.append(f"[{extra}]")

    return " | ".join(filter(None, msg_parts))


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure structlog and the standard library root logger."""
    config = config or LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(level=config.level.value, handlers=[handler], force=True)

    for lib_name, level in config.third_party_levels.items():
        logging.getLogger(lib_name).setLevel(level.value)

    processors: list[Any] = [add_log_level, add_timestamp]
    if config.mask_sensitive_data:
        processors.append(mask_sensitive_data)
    processors.append(JSONRenderer() if config.format == LogFormat.JSON else text_renderer)

    configure(
        processors=processors,
        logger_factory=lambda *args: logging.getLogger(str(args[0]) if args else "genai_client"),
        cache_logger_on_first_use=True,
    )

    get_logger(__name__).info("Logging system initialized", level=config.level.value, format=config.format.value)
