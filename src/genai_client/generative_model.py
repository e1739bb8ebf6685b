"""A model id bound to default generation parameters."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any

from .domain.content import Content
from .domain.generation import GenerationConfig, SafetySetting
from .domain.request import GenerationRequest, coerce_contents
from .domain.response import CountTokensResponse, GenerationResponse, StreamChunk

if TYPE_CHECKING:
    from .client import GenerativeClient

Prompt = str | Content | Sequence[Any]


class GenerativeModel:
    """Wraps default parameters for calls to one model.

    Per-call generation config fields override the bound defaults field by
    field; per-call safety settings replace the bound ones.
    """

    def __init__(
        self,
        client: GenerativeClient,
        model: str,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        system_instruction: str | Content | None = None,
        tools: Sequence[dict[str, Any]] | None = None,
        tool_config: dict[str, Any] | None = None,
        cached_content: str | None = None,
    ):
        self.client = client
        self.model = model
        self.generation_config = generation_config
        self.safety_settings = tuple(safety_settings) if safety_settings is not None else None
        if isinstance(system_instruction, str):
            system_instruction = Content.from_text(system_instruction)
        self.system_instruction = system_instruction
        self.tools = tuple(tools) if tools is not None else None
        self.tool_config = tool_config
        self.cached_content = cached_content

    def __repr__(self) -> str:
        return f"GenerativeModel(model={self.model!r})"

    def build_request(
        self,
        prompt: Prompt,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
    ) -> GenerationRequest:
        """Combine a prompt with the bound defaults into a request."""
        config = self.generation_config
        if config is None:
            config = generation_config
        elif generation_config is not None:
            config = config.merged_with(generation_config)

        return GenerationRequest(
            model=self.model,
            contents=coerce_contents(prompt),
            generation_config=config,
            safety_settings=tuple(safety_settings) if safety_settings is not None else self.safety_settings,
            system_instruction=self.system_instruction,
            tools=self.tools,
            tool_config=self.tool_config,
            cached_content=self.cached_content,
        )

    async def generate_content(
        self,
        prompt: Prompt,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
    ) -> GenerationResponse:
        """Generate a complete response for a prompt.

        Args:
            prompt: A string, a ``Content``, a list of parts or a list of turns
            generation_config: Overrides for the bound generation config
            safety_settings: Replacement for the bound safety settings

        Returns:
            The generated response
        """
        return await self.client.generate(self.build_request(prompt, generation_config, safety_settings))

    def stream_content(
        self,
        prompt: Prompt,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream a response for a prompt."""
        return self.client.generate_stream(self.build_request(prompt, generation_config, safety_settings))

    async def count_tokens(self, prompt: Prompt) -> CountTokensResponse:
        """Count tokens for a prompt with the bound defaults applied."""
        return await self.client.count_tokens(self.build_request(prompt))
