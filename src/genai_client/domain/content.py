"""Content and part models shared by requests and responses."""

from __future__ import annotations

import base64
from typing import Annotated, Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel

from .enums import Role


class WireModel(BaseModel):
    """Base for models exchanged with the service (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the service's JSON shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Blob(WireModel):
    """Raw media bytes, base64 encoded."""

    mime_type: str
    data: str


class FileData(WireModel):
    """Reference to media uploaded to the service."""

    mime_type: str
    file_uri: str


class FunctionCall(WireModel):
    """A function call predicted by the model."""

    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class FunctionResponse(WireModel):
    """The result of a function call, sent back to the model."""

    name: str
    response: dict[str, Any] = Field(default_factory=dict)


class TextPart(WireModel):
    """Plain text."""

    part_type: ClassVar[str] = "text"

    text: str


class InlineDataPart(WireModel):
    """Inline media such as an image."""

    part_type: ClassVar[str] = "inline_data"

    inline_data: Blob

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> InlineDataPart:
        """Build an inline part from raw bytes."""
        return cls(inline_data=Blob(mime_type=mime_type, data=base64.b64encode(data).decode("ascii")))


class FileDataPart(WireModel):
    """Media referenced by URI."""

    part_type: ClassVar[str] = "file_data"

    file_data: FileData


class FunctionCallPart(WireModel):
    """A function call emitted by the model."""

    part_type: ClassVar[str] = "function_call"

    function_call: FunctionCall


class FunctionResponsePart(WireModel):
    """A function result supplied by the caller."""

    part_type: ClassVar[str] = "function_response"

    function_response: FunctionResponse


PART_KEYS = {
    "text": "text",
    "inlineData": "inline_data",
    "inline_data": "inline_data",
    "fileData": "file_data",
    "file_data": "file_data",
    "functionCall": "function_call",
    "function_call": "function_call",
    "functionResponse": "function_response",
    "function_response": "function_response",
}


def part_tag(value: Any) -> str | None:
    """Pick the part variant from the key present on the wire object."""
    if isinstance(value, dict):
        for key, tag in PART_KEYS.items():
            if key in value:
                return tag
        return None
    return getattr(value, "part_type", None)


Part = Annotated[
    Union[
        Annotated[TextPart, Tag("text")],
        Annotated[InlineDataPart, Tag("inline_data")],
        Annotated[FileDataPart, Tag("file_data")],
        Annotated[FunctionCallPart, Tag("function_call")],
        Annotated[FunctionResponsePart, Tag("function_response")],
    ],
    Discriminator(part_tag),
]


class Content(WireModel):
    """One turn of a conversation: a role and its ordered parts."""

    role: Role | None = Role.USER
    parts: tuple[Part, ...] = ()

    @classmethod
    def from_text(cls, text: str, role: Role = Role.USER) -> Content:
        """Build a single-text-part content."""
        return cls(role=role, parts=(TextPart(text=text),))

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))


def merge_parts(parts: list[Part]) -> tuple[Part, ...]:
    """Join adjacent text parts, keeping every other part in place."""
    merged: list[Part] = []
    for part in parts:
        if isinstance(part, TextPart) and merged and isinstance(merged[-1], TextPart):
            merged[-1] = TextPart(text=merged[-1].text + part.text)
        else:
            merged.append(part)
    return tuple(merged)
