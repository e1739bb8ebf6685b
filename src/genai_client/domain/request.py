"""Generation request model."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .content import Content, Part, TextPart, WireModel
from .enums import Role
from .generation import GenerationConfig, SafetySetting


class GenerationRequest(WireModel):
    """A complete, immutable request for generated content."""

    model: str | None = Field(default=None, description="Model id; the client default is used when omitted")
    contents: tuple[Content, ...] = Field(default=(), description="Ordered conversation turns")
    generation_config: GenerationConfig | None = None
    safety_settings: tuple[SafetySetting, ...] | None = None
    system_instruction: Content | None = None
    tools: tuple[dict[str, Any], ...] | None = None
    tool_config: dict[str, Any] | None = None
    cached_content: str | None = Field(default=None, description="Name of a cachedContents resource")

    @classmethod
    def from_text(cls, text: str, model: str | None = None, **kwargs: Any) -> GenerationRequest:
        """Build a single user turn request from a prompt string."""
        return cls(model=model, contents=(Content.from_text(text),), **kwargs)

    @classmethod
    def from_parts(cls, parts: list[Part], model: str | None = None, **kwargs: Any) -> GenerationRequest:
        """Build a single user turn request from parts."""
        return cls(model=model, contents=(Content(role=Role.USER, parts=tuple(parts)),), **kwargs)


def coerce_contents(prompt: str | Content | list[Any] | tuple[Any, ...]) -> tuple[Content, ...]:
    """Normalize the prompt shapes accepted by convenience APIs.

    Accepts a string, a single ``Content``, a sequence of parts (one user
    turn) or a sequence of ``Content`` turns.
    """
    if isinstance(prompt, str):
        return (Content.from_text(prompt),)
    if isinstance(prompt, Content):
        return (prompt,)

    items = list(prompt)
    if all(isinstance(item, Content) for item in items):
        return tuple(items)

    parts = [TextPart(text=item) if isinstance(item, str) else item for item in items]
    return (Content(role=Role.USER, parts=tuple(parts)),)
