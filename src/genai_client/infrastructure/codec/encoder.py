"""Request encoding and client-side validation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from ...core.exceptions import InvalidRequestError
from ...domain.content import Content
from ...domain.enums import Role
from ...domain.generation import (
    CANDIDATE_COUNT_RANGE,
    MAX_STOP_SEQUENCES,
    TEMPERATURE_RANGE,
    TOP_P_RANGE,
    GenerationConfig,
)
from ...domain.request import GenerationRequest
from ..http.endpoint import Task, model_resource_name


@dataclass(frozen=True)
class EncodedPayload:
    """Wire form of a request: method, service method, query and body."""

    method: str
    task: Task
    body: dict[str, Any]
    params: dict[str, str] = field(default_factory=dict)


def _check_range(name: str, value: float | None, low: float, high: float | None = None) -> None:
    if value is None:
        return
    if isinstance(value, float) and math.isnan(value):
        raise InvalidRequestError(name, "must be a number")
    if value < low or (high is not None and value > high):
        bound = f"between {low} and {high}" if high is not None else f"at least {low}"
        raise InvalidRequestError(name, f"must be {bound}, got {value}")


def validate_generation_config(config: GenerationConfig) -> None:
    """Reject parameters outside the service's documented ranges.

    Raises:
        InvalidRequestError: Naming the first offending field
    """
    _check_range("generation_config.temperature", config.temperature, *TEMPERATURE_RANGE)
    _check_range("generation_config.top_p", config.top_p, *TOP_P_RANGE)
    _check_range("generation_config.top_k", config.top_k, 1)
    _check_range("generation_config.max_output_tokens", config.max_output_tokens, 1)
    _check_range("generation_config.candidate_count", config.candidate_count, *CANDIDATE_COUNT_RANGE)

    if config.stop_sequences is not None:
        if len(config.stop_sequences) > MAX_STOP_SEQUENCES:
            raise InvalidRequestError(
                "generation_config.stop_sequences", f"at most {MAX_STOP_SEQUENCES} sequences are allowed"
            )
        if any(not sequence for sequence in config.stop_sequences):
            raise InvalidRequestError("generation_config.stop_sequences", "sequences must not be empty")

    if config.response_schema is not None and config.response_mime_type is None:
        raise InvalidRequestError("generation_config.response_schema", "requires response_mime_type")


def validate_contents(contents: tuple[Content, ...]) -> None:
    """Reject empty conversations and empty turns."""
    if not contents:
        raise InvalidRequestError("contents", "must contain at least one content")
    for position, content in enumerate(contents):
        if not content.parts:
            raise InvalidRequestError(f"contents[{position}].parts", "must contain at least one part")


def _build_body(request: GenerationRequest) -> dict[str, Any]:
    validate_contents(request.contents)
    if request.model is not None and not request.model.strip():
        raise InvalidRequestError("model", "must not be empty")
    if request.generation_config is not None:
        validate_generation_config(request.generation_config)

    # System turns travel in systemInstruction, after any explicit instruction.
    system_parts = list(request.system_instruction.parts) if request.system_instruction else []
    turns = []
    for content in request.contents:
        if content.role is Role.SYSTEM:
            system_parts.extend(content.parts)
        else:
            turns.append(content.to_wire())
    if not turns:
        raise InvalidRequestError("contents", "must contain at least one user or model turn")

    body: dict[str, Any] = {"contents": turns}
    if system_parts:
        body["systemInstruction"] = Content(role=None, parts=tuple(system_parts)).to_wire()
    if request.generation_config is not None:
        generation_config = request.generation_config.to_wire()
        if generation_config:
            body["generationConfig"] = generation_config
    if request.safety_settings:
        body["safetySettings"] = [setting.to_wire() for setting in request.safety_settings]
    if request.tools:
        body["tools"] = list(request.tools)
    if request.tool_config:
        body["toolConfig"] = request.tool_config
    if request.cached_content:
        body["cachedContent"] = request.cached_content
    return body


def encode(request: GenerationRequest, streaming: bool) -> EncodedPayload:
    """Serialize a generation request.

    Args:
        request: The request to encode
        streaming: Whether to target the streaming method

    Returns:
        The encoded payload

    Raises:
        InvalidRequestError: If the request violates a documented constraint
    """
    body = _build_body(request)
    if streaming:
        return EncodedPayload(method="POST", task=Task.STREAM_GENERATE_CONTENT, body=body, params={"alt": "sse"})
    return EncodedPayload(method="POST", task=Task.GENERATE_CONTENT, body=body)


def encode_count_tokens(request: GenerationRequest, model: str) -> EncodedPayload:
    """Serialize a token count request for the same contents.

    Args:
        request: The request whose tokens are counted
        model: Resolved model id, required when the full request is wrapped
    """
    body = _build_body(request)
    if len(body) == 1:
        return EncodedPayload(method="POST", task=Task.COUNT_TOKENS, body=body)
    # Anything beyond plain contents must be wrapped in a full request.
    wrapped = {"model": model_resource_name(model), **body}
    return EncodedPayload(method="POST", task=Task.COUNT_TOKENS, body={"generateContentRequest": wrapped})
