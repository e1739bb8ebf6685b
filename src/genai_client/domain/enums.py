"""Domain enums for generation requests and responses."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Author of a content turn."""

    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


class FinishReason(str, Enum):
    """Why a candidate stopped generating."""

    COMPLETED = "completed"
    LENGTH_LIMITED = "length_limited"
    SAFETY_BLOCKED = "safety_blocked"
    OTHER = "other"

    @classmethod
    def from_wire(cls, value: str | None) -> FinishReason | None:
        """Map a service finish reason string to the closed enumeration.

        Args:
            value: Raw ``finishReason`` value, or None when absent

        Returns:
            The mapped reason, or None when the service sent none
        """
        if value is None:
            return None

        wire_mapping = {
            "STOP": cls.COMPLETED,
            "MAX_TOKENS": cls.LENGTH_LIMITED,
            "SAFETY": cls.SAFETY_BLOCKED,
        }
        return wire_mapping.get(value.upper(), cls.OTHER)


class HarmCategory(str, Enum):
    """Safety categories understood by the service."""

    UNSPECIFIED = "HARM_CATEGORY_UNSPECIFIED"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"
    CIVIC_INTEGRITY = "HARM_CATEGORY_CIVIC_INTEGRITY"


class HarmProbability(str, Enum):
    """Probability that content is harmful."""

    UNSPECIFIED = "HARM_PROBABILITY_UNSPECIFIED"
    NEGLIGIBLE = "NEGLIGIBLE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class HarmBlockThreshold(str, Enum):
    """Blocking threshold for a safety setting."""

    UNSPECIFIED = "HARM_BLOCK_THRESHOLD_UNSPECIFIED"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_NONE = "BLOCK_NONE"


class ResponseMimeType(str, Enum):
    """Output formats the service can be asked for."""

    TEXT_PLAIN = "text/plain"
    APPLICATION_JSON = "application/json"
