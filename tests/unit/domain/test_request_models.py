"""
Unit tests for request-side domain models.

Tests cover content parts, prompt coercion and generation config merging.
"""

import base64

import pytest

from genai_client.domain import (
    Content,
    FunctionCallPart,
    GenerationConfig,
    GenerationRequest,
    InlineDataPart,
    Role,
    TextPart,
)
from genai_client.domain.content import merge_parts
from genai_client.domain.request import coerce_contents


class TestContent:
    """Test content and part models."""

    def test_from_text(self):
        content = Content.from_text("Hello")

        assert content.role is Role.USER
        assert content.parts == (TextPart(text="Hello"),)
        assert content.text == "Hello"

    def test_wire_parts_pick_their_variant(self):
        content = Content.model_validate(
            {
                "role": "model",
                "parts": [
                    {"text": "Calling a tool"},
                    {"functionCall": {"name": "get_weather", "args": {"city": "Lisbon"}}},
                    {"inlineData": {"mimeType": "image/png", "data": "AAAA"}},
                ],
            }
        )

        assert isinstance(content.parts[0], TextPart)
        assert isinstance(content.parts[1], FunctionCallPart)
        assert content.parts[1].function_call.args == {"city": "Lisbon"}
        assert isinstance(content.parts[2], InlineDataPart)
        assert content.text == "Calling a tool"

    def test_to_wire_uses_camel_case(self):
        part = InlineDataPart.from_bytes(b"\x89PNG", "image/png")

        wire = Content(role=Role.USER, parts=(part,)).to_wire()

        assert wire == {
            "role": "user",
            "parts": [{"inlineData": {"mimeType": "image/png", "data": base64.b64encode(b"\x89PNG").decode()}}],
        }

    def test_merge_parts_joins_adjacent_text(self):
        call = FunctionCallPart.model_validate({"functionCall": {"name": "f"}})

        merged = merge_parts([TextPart(text="a"), TextPart(text="b"), call, TextPart(text="c")])

        assert merged == (TextPart(text="ab"), call, TextPart(text="c"))


class TestGenerationRequest:
    """Test request construction helpers."""

    def test_from_text(self):
        request = GenerationRequest.from_text("Hi", model="gemini-1.5-pro")

        assert request.model == "gemini-1.5-pro"
        assert request.contents[0].text == "Hi"

    def test_from_parts(self):
        request = GenerationRequest.from_parts([TextPart(text="Describe"), InlineDataPart.from_bytes(b"img", "image/jpeg")])

        assert len(request.contents) == 1
        assert len(request.contents[0].parts) == 2

    @pytest.mark.parametrize(
        "prompt,expected_turns",
        [
            ("plain text", 1),
            (Content.from_text("one turn"), 1),
            ([Content.from_text("q"), Content.from_text("a", role=Role.MODEL), Content.from_text("q2")], 3),
            (["text", TextPart(text=" more")], 1),
        ],
    )
    def test_coerce_contents(self, prompt, expected_turns):
        contents = coerce_contents(prompt)

        assert len(contents) == expected_turns
        assert all(isinstance(content, Content) for content in contents)

    def test_coerce_parts_builds_single_user_turn(self):
        contents = coerce_contents(["Hello", TextPart(text=" world")])

        assert contents[0].role is Role.USER
        assert contents[0].text == "Hello world"


class TestGenerationConfig:
    """Test generation config handling."""

    def test_out_of_range_values_are_constructible(self):
        config = GenerationConfig(temperature=-1.0)

        assert config.temperature == -1.0

    def test_merged_with_prefers_overrides(self):
        base = GenerationConfig(temperature=0.2, max_output_tokens=100)

        merged = base.merged_with(GenerationConfig(temperature=0.9))

        assert merged.temperature == 0.9
        assert merged.max_output_tokens == 100

    def test_merged_with_none_returns_self(self):
        base = GenerationConfig(top_k=4)

        assert base.merged_with(None) is base

    def test_to_wire_omits_unset_fields(self):
        config = GenerationConfig(max_output_tokens=64, stop_sequences=("END",))

        assert config.to_wire() == {"maxOutputTokens": 64, "stopSequences": ["END"]}
