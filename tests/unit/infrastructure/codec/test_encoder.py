"""
Unit tests for request encoding.

Tests cover the wire body shape, streaming method selection and
client-side validation of generation parameters.
"""

import pytest

from genai_client import InvalidRequestError
from genai_client.domain import (
    Content,
    GenerationConfig,
    GenerationRequest,
    HarmBlockThreshold,
    HarmCategory,
    Role,
    SafetySetting,
)
from genai_client.infrastructure.codec import encode, encode_count_tokens
from genai_client.infrastructure.http import Task


class TestEncodeBody:
    """Test the encoded request body."""

    def test_minimal_request(self):
        payload = encode(GenerationRequest.from_text("Hello"), streaming=False)

        assert payload.method == "POST"
        assert payload.task is Task.GENERATE_CONTENT
        assert payload.params == {}
        assert payload.body == {"contents": [{"role": "user", "parts": [{"text": "Hello"}]}]}

    def test_streaming_selects_sse_method(self):
        payload = encode(GenerationRequest.from_text("Hello"), streaming=True)

        assert payload.task is Task.STREAM_GENERATE_CONTENT
        assert payload.params == {"alt": "sse"}

    def test_full_request(self):
        request = GenerationRequest.from_text(
            "Hello",
            generation_config=GenerationConfig(temperature=0.7, max_output_tokens=256),
            safety_settings=(
                SafetySetting(category=HarmCategory.HARASSMENT, threshold=HarmBlockThreshold.BLOCK_ONLY_HIGH),
            ),
            system_instruction=Content.from_text("Be terse"),
            tools=({"functionDeclarations": [{"name": "lookup"}]},),
            tool_config={"functionCallingConfig": {"mode": "AUTO"}},
            cached_content="cachedContents/abc",
        )

        body = encode(request, streaming=False).body

        assert body["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 256}
        assert body["safetySettings"] == [
            {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"}
        ]
        assert body["systemInstruction"] == {"parts": [{"text": "Be terse"}]}
        assert body["tools"] == [{"functionDeclarations": [{"name": "lookup"}]}]
        assert body["toolConfig"] == {"functionCallingConfig": {"mode": "AUTO"}}
        assert body["cachedContent"] == "cachedContents/abc"

    def test_system_turns_lifted_into_instruction(self):
        request = GenerationRequest(
            contents=(
                Content.from_text("You are a pirate", role=Role.SYSTEM),
                Content.from_text("Hello"),
            ),
            system_instruction=Content.from_text("Be terse"),
        )

        body = encode(request, streaming=False).body

        assert body["contents"] == [{"role": "user", "parts": [{"text": "Hello"}]}]
        assert body["systemInstruction"] == {"parts": [{"text": "Be terse"}, {"text": "You are a pirate"}]}

    def test_multi_turn_order_preserved(self):
        request = GenerationRequest(
            contents=(
                Content.from_text("q1"),
                Content.from_text("a1", role=Role.MODEL),
                Content.from_text("q2"),
            )
        )

        body = encode(request, streaming=False).body

        assert [turn["role"] for turn in body["contents"]] == ["user", "model", "user"]


class TestValidation:
    """Test client-side validation before any I/O."""

    @pytest.mark.parametrize(
        "config,field",
        [
            (GenerationConfig(temperature=-1.0), "generation_config.temperature"),
            (GenerationConfig(temperature=2.5), "generation_config.temperature"),
            (GenerationConfig(temperature=float("nan")), "generation_config.temperature"),
            (GenerationConfig(top_p=1.5), "generation_config.top_p"),
            (GenerationConfig(top_k=0), "generation_config.top_k"),
            (GenerationConfig(max_output_tokens=0), "generation_config.max_output_tokens"),
            (GenerationConfig(candidate_count=9), "generation_config.candidate_count"),
            (GenerationConfig(stop_sequences=("a", "b", "c", "d", "e", "f")), "generation_config.stop_sequences"),
            (GenerationConfig(stop_sequences=("",)), "generation_config.stop_sequences"),
            (GenerationConfig(response_schema={"type": "object"}), "generation_config.response_schema"),
        ],
    )
    def test_invalid_generation_config(self, config, field):
        request = GenerationRequest.from_text("Hello", generation_config=config)

        with pytest.raises(InvalidRequestError) as exc_info:
            encode(request, streaming=False)

        assert exc_info.value.field == field

    @pytest.mark.parametrize("temperature", [0.0, 2.0])
    def test_range_bounds_inclusive(self, temperature):
        request = GenerationRequest.from_text("Hello", generation_config=GenerationConfig(temperature=temperature))

        assert encode(request, streaming=False).body["generationConfig"] == {"temperature": temperature}

    def test_empty_contents_rejected(self):
        with pytest.raises(InvalidRequestError) as exc_info:
            encode(GenerationRequest(), streaming=False)

        assert exc_info.value.field == "contents"

    def test_content_without_parts_rejected(self):
        request = GenerationRequest(contents=(Content(role=Role.USER),))

        with pytest.raises(InvalidRequestError) as exc_info:
            encode(request, streaming=False)

        assert exc_info.value.field == "contents[0].parts"

    def test_only_system_turns_rejected(self):
        request = GenerationRequest(contents=(Content.from_text("rules", role=Role.SYSTEM),))

        with pytest.raises(InvalidRequestError):
            encode(request, streaming=True)

    def test_blank_model_rejected(self):
        with pytest.raises(InvalidRequestError) as exc_info:
            encode(GenerationRequest.from_text("Hello", model="  "), streaming=False)

        assert exc_info.value.field == "model"


class TestEncodeCountTokens:
    """Test token count request encoding."""

    def test_plain_contents(self):
        payload = encode_count_tokens(GenerationRequest.from_text("Hello"), "gemini-1.5-flash")

        assert payload.task is Task.COUNT_TOKENS
        assert payload.body == {"contents": [{"role": "user", "parts": [{"text": "Hello"}]}]}

    def test_wraps_full_request(self):
        request = GenerationRequest.from_text("Hello", system_instruction=Content.from_text("Be terse"))

        payload = encode_count_tokens(request, "gemini-1.5-flash")

        wrapped = payload.body["generateContentRequest"]
        assert wrapped["model"] == "models/gemini-1.5-flash"
        assert wrapped["systemInstruction"] == {"parts": [{"text": "Be terse"}]}
