"""Generation parameters and safety settings."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .content import WireModel
from .enums import HarmBlockThreshold, HarmCategory, ResponseMimeType

# Documented service ranges, enforced by the request encoder.
TEMPERATURE_RANGE = (0.0, 2.0)
TOP_P_RANGE = (0.0, 1.0)
CANDIDATE_COUNT_RANGE = (1, 8)
MAX_STOP_SEQUENCES = 5


class GenerationConfig(WireModel):
    """Sampling and output parameters.

    Every field defaults to None, meaning the model's own default applies.
    Values are range-checked when the request is encoded, so an invalid
    configuration can still be built and inspected.
    """

    temperature: float | None = Field(default=None, description="Sampling temperature, 0.0 to 2.0")
    top_p: float | None = Field(default=None, description="Nucleus sampling mass, 0.0 to 1.0")
    top_k: int | None = Field(default=None, description="Top-k sampling size, at least 1")
    max_output_tokens: int | None = Field(default=None, description="Maximum tokens per candidate, at least 1")
    candidate_count: int | None = Field(default=None, description="Number of candidates, 1 to 8")
    stop_sequences: tuple[str, ...] | None = Field(default=None, description="Up to 5 sequences that stop generation")
    response_mime_type: ResponseMimeType | None = Field(default=None, description="Output format")
    response_schema: dict[str, Any] | None = Field(default=None, description="OpenAPI schema for JSON output")

    def merged_with(self, overrides: GenerationConfig | None) -> GenerationConfig:
        """Return a copy with every field set on ``overrides`` taking precedence."""
        if overrides is None:
            return self
        return self.model_copy(update=overrides.model_dump(exclude_none=True))


class SafetySetting(WireModel):
    """Blocking threshold for one harm category."""

    category: HarmCategory
    threshold: HarmBlockThreshold
