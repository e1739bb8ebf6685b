"""Client facade for the Generative Language API."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError
from structlog import get_logger

from .core.config.settings import ClientConfig
from .core.exceptions import ApiError, DecodeError
from .domain.response import CountTokensResponse, GenerationResponse, ModelInfo, StreamChunk
from .infrastructure.codec.classifier import classify
from .infrastructure.codec.decoder import StreamDecoder, decode_response
from .infrastructure.codec.encoder import encode, encode_count_tokens
from .infrastructure.http.endpoint import ResolvedEndpoint, Task, resolve
from .infrastructure.http.transport import HttpTransport
from .infrastructure.resilience.retry import RetryController, SleepFunc

if TYPE_CHECKING:
    from .domain.request import GenerationRequest
    from .generative_model import GenerativeModel

logger = get_logger(__name__)


class GenerativeClient:
    """Asynchronous client for content generation.

    Calls are independent and may run concurrently; the configuration is
    read-only and the connection pool inside the transport is the only
    shared resource.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: HttpTransport | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFunc | None = None,
    ):
        """Initialize the client.

        Args:
            config: Client configuration
            transport: Prebuilt transport; built from ``config`` when omitted
            http_transport: Optional httpx transport used to build the default transport
            sleep: Awaitable sleep used between retries
        """
        self.config = config
        self._transport = transport or HttpTransport(timeout=config.timeout, transport=http_transport)
        self._retry = RetryController(config.retry, sleep=sleep)

    async def __aenter__(self) -> GenerativeClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close HTTP client connections."""
        await self._transport.close()

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Generate a complete response.

        Args:
            request: The generation request

        Returns:
            Response with at least one candidate

        Raises:
            ApiError: The classified failure; validation and configuration
                errors are raised before any network I/O
        """
        payload = encode(request, streaming=False)
        endpoint = resolve(self.config, payload.task, request.model)
        logger.debug("Dispatching request", task=payload.task.value, url=endpoint.url)

        async def attempt() -> GenerationResponse:
            raw = await self._transport.send(payload.method, endpoint.url, endpoint.headers, payload.body, payload.params)
            if not 200 <= raw.status_code < 300:
                raise classify(raw.status_code, raw.body, headers=raw.headers)
            return decode_response(raw.body)

        return await self._retry.run(attempt)

    async def generate_stream(self, request: GenerationRequest) -> AsyncIterator[StreamChunk]:
        """Generate a response as a stream of chunks.

        Failures before the first chunk is yielded are retried. A failure
        after that ends the iteration by raising the classified error; chunks
        already yielded remain valid. Closing the iterator early releases the
        HTTP connection.

        Yields:
            Chunks in network arrival order; the last one is terminal

        Raises:
            ApiError: The classified failure
        """
        payload = encode(request, streaming=True)
        endpoint = resolve(self.config, payload.task, request.model)
        logger.debug("Dispatching stream", task=payload.task.value, url=endpoint.url)
        config = request.generation_config
        candidate_count = (config.candidate_count if config else None) or 1

        attempt = 0
        while True:
            attempt += 1
            delivered = False
            try:
                async with self._transport.open_stream(
                    payload.method, endpoint.url, endpoint.headers, payload.body, payload.params
                ) as response:
                    if not 200 <= response.status_code < 300:
                        body = await response.aread()
                        raise classify(response.status_code, body, headers=response.headers)

                    decoder = StreamDecoder(candidate_count)
                    async for frame in response.iter_frames():
                        for chunk in decoder.feed(frame):
                            delivered = True
                            yield chunk
                    for chunk in decoder.close():
                        delivered = True
                        yield chunk

                    if not decoder.terminated:
                        if decoder.chunks_decoded == 0:
                            raise DecodeError("Stream closed without any record")
                        raise DecodeError("Stream closed before the terminal chunk")
            except ApiError as e:
                if delivered or not self._retry.should_retry(e, attempt):
                    logger.error(
                        "Stream failed",
                        attempts=attempt,
                        after_delivery=delivered,
                        error_kind=e.kind.value,
                    )
                    raise
                await self._retry.backoff(attempt, e)
                continue
            return

    async def count_tokens(self, request: GenerationRequest) -> CountTokensResponse:
        """Count the tokens a request would consume."""
        model = request.model or self.config.default_model
        payload = encode_count_tokens(request, model)
        endpoint = resolve(self.config, payload.task, model)
        document = await self._retry.run(lambda: self._request_json(payload.method, endpoint, payload.body))
        return self._validate(CountTokensResponse, document)

    async def list_models(self, page_size: int | None = None) -> list[ModelInfo]:
        """List the models available to the configured key, following pagination."""
        endpoint = resolve(self.config, Task.LIST_MODELS)
        models: list[ModelInfo] = []
        page_token: str | None = None

        while True:
            params: dict[str, str] = {}
            if page_size:
                params["pageSize"] = str(page_size)
            if page_token:
                params["pageToken"] = page_token

            document = await self._retry.run(lambda: self._request_json("GET", endpoint, None, params))
            models.extend(self._validate(ModelInfo, item) for item in document.get("models", []))
            page_token = document.get("nextPageToken")
            if not page_token:
                return models

    async def get_model(self, model: str) -> ModelInfo:
        """Fetch metadata for one model."""
        endpoint = resolve(self.config, Task.GET_MODEL, model)
        document = await self._retry.run(lambda: self._request_json("GET", endpoint, None))
        return self._validate(ModelInfo, document)

    def get_generative_model(self, model: str | None = None, **defaults: Any) -> GenerativeModel:
        """Bind a model id and default parameters to this client.

        Args:
            model: Model id; the configured default when omitted
            **defaults: ``generation_config``, ``safety_settings``,
                ``system_instruction``, ``tools``, ``tool_config`` or
                ``cached_content``
        """
        from .generative_model import GenerativeModel

        return GenerativeModel(self, model or self.config.default_model, **defaults)

    async def _request_json(
        self,
        method: str,
        endpoint: ResolvedEndpoint,
        body: dict[str, Any] | None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        raw = await self._transport.send(method, endpoint.url, endpoint.headers, body, params)
        if not 200 <= raw.status_code < 300:
            raise classify(raw.status_code, raw.body, headers=raw.headers)
        try:
            document = json.loads(raw.body)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError("Response body is not valid JSON", fragment=raw.body, original_error=e) from e
        if not isinstance(document, dict):
            raise DecodeError("Response is not a JSON object", fragment=raw.body)
        return document

    @staticmethod
    def _validate(model_type: Any, document: Any) -> Any:
        try:
            return model_type.model_validate(document)
        except ValidationError as e:
            raise DecodeError(
                f"Response does not match {model_type.__name__}", fragment=json.dumps(document), original_error=e
            ) from e
