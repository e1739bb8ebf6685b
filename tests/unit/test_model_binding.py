"""Unit tests for GenerativeModel request building."""

from unittest.mock import AsyncMock, MagicMock

from genai_client import (
    Content,
    GenerationConfig,
    GenerationRequest,
    GenerativeModel,
    HarmBlockThreshold,
    HarmCategory,
    Role,
    SafetySetting,
)


class TestBuildRequest:
    """Test merging bound defaults with per-call arguments."""

    def test_string_system_instruction_wrapped(self):
        model = GenerativeModel(MagicMock(), "gemini-1.5-pro", system_instruction="Be brief")

        request = model.build_request("Hello")

        assert request.model == "gemini-1.5-pro"
        assert request.system_instruction == Content.from_text("Be brief")
        assert request.contents == (Content.from_text("Hello"),)

    def test_per_call_config_only(self):
        model = GenerativeModel(MagicMock(), "m")

        request = model.build_request("Hello", generation_config=GenerationConfig(top_k=3))

        assert request.generation_config == GenerationConfig(top_k=3)

    def test_bound_safety_settings_used_by_default(self):
        setting = SafetySetting(category=HarmCategory.HATE_SPEECH, threshold=HarmBlockThreshold.BLOCK_LOW_AND_ABOVE)
        model = GenerativeModel(MagicMock(), "m", safety_settings=[setting])

        assert model.build_request("Hello").safety_settings == (setting,)

    def test_conversation_prompt(self):
        model = GenerativeModel(MagicMock(), "m")
        turns = [Content.from_text("q"), Content.from_text("a", role=Role.MODEL), Content.from_text("q2")]

        request = model.build_request(turns)

        assert [content.role for content in request.contents] == [Role.USER, Role.MODEL, Role.USER]

    def test_repr(self):
        assert repr(GenerativeModel(MagicMock(), "gemini-1.5-flash")) == "GenerativeModel(model='gemini-1.5-flash')"


class TestDelegation:
    """Test that calls are delegated to the client."""

    async def test_generate_content(self):
        client = MagicMock()
        client.generate = AsyncMock(return_value="response")
        model = GenerativeModel(client, "m", generation_config=GenerationConfig(temperature=0.1))

        result = await model.generate_content("Hello")

        assert result == "response"
        request = client.generate.await_args.args[0]
        assert isinstance(request, GenerationRequest)
        assert request.generation_config.temperature == 0.1

    async def test_count_tokens(self):
        client = MagicMock()
        client.count_tokens = AsyncMock(return_value="tokens")
        model = GenerativeModel(client, "m")

        assert await model.count_tokens("Hello") == "tokens"
        client.count_tokens.assert_awaited_once()
