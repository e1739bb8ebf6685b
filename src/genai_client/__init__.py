"""Asynchronous client for the Generative Language API."""

from .client import GenerativeClient
from .core.config import ApiVersion, ClientConfig, ClientSettings, LoggingConfig, RetryPolicy, load_client_config, setup_logging
from .core.exceptions import (
    ApiError,
    ApiTimeoutError,
    AuthFailureError,
    DecodeError,
    ErrorKind,
    GenAIClientError,
    InvalidRequestError,
    NetworkError,
    RateLimitedError,
    SafetyBlockedError,
    ServerError,
)
from .domain import (
    Candidate,
    CandidateDelta,
    Content,
    CountTokensResponse,
    FinishReason,
    GenerationConfig,
    GenerationRequest,
    GenerationResponse,
    HarmBlockThreshold,
    HarmCategory,
    InlineDataPart,
    ModelInfo,
    Role,
    SafetySetting,
    StreamChunk,
    TextPart,
    merge_chunks,
)
from .generative_model import GenerativeModel

__version__ = "0.1.0"

__all__ = [
    # Client
    "GenerativeClient",
    "GenerativeModel",
    # Configuration
    "ApiVersion",
    "ClientConfig",
    "ClientSettings",
    "LoggingConfig",
    "RetryPolicy",
    "load_client_config",
    "setup_logging",
    # Data types
    "Candidate",
    "CandidateDelta",
    "Content",
    "CountTokensResponse",
    "FinishReason",
    "GenerationConfig",
    "GenerationRequest",
    "GenerationResponse",
    "HarmBlockThreshold",
    "HarmCategory",
    "InlineDataPart",
    "ModelInfo",
    "Role",
    "SafetySetting",
    "StreamChunk",
    "TextPart",
    "merge_chunks",
    # Errors
    "GenAIClientError",
    "ApiError",
    "ErrorKind",
    "NetworkError",
    "ApiTimeoutError",
    "AuthFailureError",
    "InvalidRequestError",
    "RateLimitedError",
    "ServerError",
    "DecodeError",
    "SafetyBlockedError",
]
