"""Response models for whole and streamed generation results."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field, model_validator

from .content import Content, Part, WireModel, merge_parts
from .enums import FinishReason, HarmCategory, HarmProbability, Role


class SafetyRating(WireModel):
    """Safety rating for one harm category."""

    category: HarmCategory | str
    probability: HarmProbability | str
    blocked: bool | None = None


class CitationSource(WireModel):
    """Attribution for a span of generated content."""

    start_index: int | None = None
    end_index: int | None = None
    uri: str | None = None
    license: str | None = None


class CitationMetadata(WireModel):
    """Citations attached to a candidate."""

    citation_sources: tuple[CitationSource, ...] = ()


class PromptFeedback(WireModel):
    """Feedback on the prompt, including whether it was blocked."""

    block_reason: str | None = None
    safety_ratings: tuple[SafetyRating, ...] = ()
    block_reason_message: str | None = None


class UsageMetadata(WireModel):
    """Token accounting for one request."""

    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0
    cached_content_token_count: int | None = None


class CandidateDelta(WireModel):
    """One candidate's fragment inside a stream chunk."""

    index: int = 0
    content: Content = Field(default_factory=lambda: Content(role=Role.MODEL))
    finish_reason: FinishReason | None = None
    raw_finish_reason: str | None = None
    finish_message: str | None = None
    safety_ratings: tuple[SafetyRating, ...] = ()
    citation_metadata: CitationMetadata | None = None
    token_count: int | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_wire(cls, data: object) -> object:
        """Map the wire finish reason to the closed enumeration.

        The raw string is kept for diagnostics. Content sent by the service
        without a role is model output.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if isinstance(data.get("finishReason"), str):
            raw = data.pop("finishReason")
            try:
                data["finishReason"] = FinishReason(raw)
            except ValueError:
                data.setdefault("rawFinishReason", raw)
                data["finishReason"] = FinishReason.from_wire(raw)
        if isinstance(data.get("content"), dict) and "role" not in data["content"]:
            data["content"] = {**data["content"], "role": Role.MODEL.value}
        return data


class Candidate(CandidateDelta):
    """A complete generated alternative."""

    finish_reason: FinishReason = FinishReason.OTHER

    @property
    def text(self) -> str:
        """Concatenated text of the candidate's parts."""
        return self.content.text


class GenerationResponse(WireModel):
    """Result of a non-streaming call."""

    candidates: tuple[Candidate, ...] = Field(min_length=1)
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None
    model_version: str | None = None

    @property
    def text(self) -> str:
        """Text of the first candidate."""
        return self.candidates[0].text


class StreamChunk(WireModel):
    """One incrementally delivered fragment of a streamed response."""

    candidates: tuple[CandidateDelta, ...] = ()
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None
    model_version: str | None = None
    is_terminal: bool = False

    @model_validator(mode="after")
    def detect_terminal(self) -> StreamChunk:
        """A chunk whose candidates have all finished closes the stream."""
        if not self.is_terminal and self.candidates and all(c.finish_reason is not None for c in self.candidates):
            object.__setattr__(self, "is_terminal", True)
        return self

    @property
    def text(self) -> str:
        """Text delta of the first candidate."""
        for candidate in self.candidates:
            if candidate.index == 0:
                return candidate.content.text
        return ""


def merge_chunks(chunks: Iterable[StreamChunk]) -> GenerationResponse:
    """Concatenate stream chunks into the equivalent whole response.

    Parts are appended per candidate index in arrival order and adjacent text
    parts are joined. The last non-empty finish reason, safety ratings and
    usage metadata win.
    """
    parts: dict[int, list[Part]] = {}
    latest: dict[int, CandidateDelta] = {}
    finish: dict[int, CandidateDelta] = {}
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None
    model_version: str | None = None

    for chunk in chunks:
        prompt_feedback = chunk.prompt_feedback or prompt_feedback
        usage_metadata = chunk.usage_metadata or usage_metadata
        model_version = chunk.model_version or model_version
        for delta in chunk.candidates:
            parts.setdefault(delta.index, []).extend(delta.content.parts)
            latest[delta.index] = delta
            if delta.finish_reason is not None:
                finish[delta.index] = delta

    candidates = []
    for index in sorted(parts):
        last = finish.get(index, latest[index])
        candidates.append(
            Candidate(
                index=index,
                content=Content(role=last.content.role or Role.MODEL, parts=merge_parts(parts[index])),
                finish_reason=last.finish_reason or FinishReason.OTHER,
                raw_finish_reason=last.raw_finish_reason,
                finish_message=last.finish_message,
                safety_ratings=last.safety_ratings,
                citation_metadata=last.citation_metadata,
                token_count=last.token_count,
            )
        )

    return GenerationResponse(
        candidates=tuple(candidates),
        prompt_feedback=prompt_feedback,
        usage_metadata=usage_metadata,
        model_version=model_version,
    )


class CountTokensResponse(WireModel):
    """Result of a token count call."""

    total_tokens: int = 0
    cached_content_token_count: int | None = None


class ModelInfo(WireModel):
    """Metadata describing a model offered by the service."""

    name: str
    base_model_id: str | None = None
    version: str | None = None
    display_name: str | None = None
    description: str | None = None
    input_token_limit: int | None = None
    output_token_limit: int | None = None
    supported_generation_methods: tuple[str, ...] = ()
    temperature: float | None = None
    max_temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
