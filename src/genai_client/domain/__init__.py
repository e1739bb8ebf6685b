"""Domain layer - request, response and content types."""

from .content import (
    Blob,
    Content,
    FileData,
    FileDataPart,
    FunctionCall,
    FunctionCallPart,
    FunctionResponse,
    FunctionResponsePart,
    InlineDataPart,
    Part,
    TextPart,
)
from .enums import FinishReason, HarmBlockThreshold, HarmCategory, HarmProbability, ResponseMimeType, Role
from .generation import GenerationConfig, SafetySetting
from .request import GenerationRequest
from .response import (
    Candidate,
    CandidateDelta,
    CitationMetadata,
    CitationSource,
    CountTokensResponse,
    GenerationResponse,
    ModelInfo,
    PromptFeedback,
    SafetyRating,
    StreamChunk,
    UsageMetadata,
    merge_chunks,
)

__all__ = [
    # Content
    "Blob",
    "Content",
    "FileData",
    "FileDataPart",
    "FunctionCall",
    "FunctionCallPart",
    "FunctionResponse",
    "FunctionResponsePart",
    "InlineDataPart",
    "Part",
    "TextPart",
    # Enums
    "FinishReason",
    "HarmBlockThreshold",
    "HarmCategory",
    "HarmProbability",
    "ResponseMimeType",
    "Role",
    # Requests
    "GenerationConfig",
    "GenerationRequest",
    "SafetySetting",
    # Responses
    "Candidate",
    "CandidateDelta",
    "CitationMetadata",
    "CitationSource",
    "CountTokensResponse",
    "GenerationResponse",
    "ModelInfo",
    "PromptFeedback",
    "SafetyRating",
    "StreamChunk",
    "UsageMetadata",
    "merge_chunks",
]
