"""Response decoding for whole-body and streamed results.

Streaming calls use server-sent events: each event carries one JSON record
on ``data:`` lines, and events are separated by a blank line. Records may be
split across transport frames, and one frame may hold several records.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError
from structlog import get_logger

from ...core.exceptions import DecodeError
from ...domain.response import GenerationResponse, StreamChunk
from .classifier import classify, error_status

logger = get_logger(__name__)

EVENT_BOUNDARY = re.compile(rb"\r\n\r\n|\n\n")
DONE_MARKER = b"[DONE]"


def _parse_json(raw: bytes | str) -> Any:
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError("Payload is not valid JSON", fragment=raw, original_error=e) from e


def decode_response(body: bytes | str) -> GenerationResponse:
    """Decode a complete non-streaming response body.

    Raises:
        SafetyBlockedError: If the prompt was blocked and no candidate returned
        DecodeError: If the body is not a well-formed response
    """
    document = _parse_json(body)
    if not isinstance(document, dict):
        raise DecodeError("Response is not a JSON object", fragment=body)
    if "error" in document or not document.get("candidates"):
        raise classify(200, document)

    try:
        return GenerationResponse.model_validate(document)
    except ValidationError as e:
        raise DecodeError("Response does not match the expected structure", fragment=body, original_error=e) from e


def decode_chunk(record: bytes | str) -> StreamChunk:
    """Decode one streamed record.

    Raises:
        ApiError: If the record reports an error or a blocked prompt
        DecodeError: If the record is not a well-formed chunk
    """
    document = _parse_json(record)
    if not isinstance(document, dict):
        raise DecodeError("Stream record is not a JSON object", fragment=record)

    error = document.get("error")
    if isinstance(error, dict):
        status = error_status(error)
        if status is None:
            raise DecodeError("Stream error record without status", fragment=record)
        raise classify(status, document)

    if not document.get("candidates"):
        feedback = document.get("promptFeedback")
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            raise classify(200, document)

    try:
        return StreamChunk.model_validate(document)
    except ValidationError as e:
        raise DecodeError("Stream record does not match the expected structure", fragment=record, original_error=e) from e


class StreamDecoder:
    """Incremental decoder turning byte frames into stream chunks.

    Chunks are produced strictly in arrival order, one record at a time, so a
    failing record never discards the chunks decoded before it. The stream
    terminates once every candidate seen (and at least ``candidate_count``
    of them) has carried a finish reason, or on an explicit end marker.
    Records after termination are dropped and counted as anomalies.
    """

    def __init__(self, candidate_count: int = 1) -> None:
        self._buffer = b""
        self._terminated = False
        self._candidate_count = max(candidate_count, 1)
        self._open: set[int] = set()
        self._finished: set[int] = set()
        self.anomalies = 0
        self.chunks_decoded = 0

    @property
    def terminated(self) -> bool:
        """Whether the terminal chunk (or an explicit end marker) was seen."""
        return self._terminated

    def feed(self, frame: bytes) -> Iterator[StreamChunk]:
        """Consume one transport frame.

        Yields:
            Each chunk completed by this frame, as soon as its record is decoded

        Raises:
            ApiError: When a record reports an error or cannot be decoded;
                chunks before it in the frame have already been yielded
        """
        self._buffer += frame

        while True:
            match = EVENT_BOUNDARY.search(self._buffer)
            if match is None:
                return
            event = self._buffer[: match.start()]
            self._buffer = self._buffer[match.end() :]
            chunk = self._decode_event(event)
            if chunk is not None:
                yield chunk

    def close(self) -> Iterator[StreamChunk]:
        """Flush a final record that was not followed by a blank line."""
        remaining, self._buffer = self._buffer, b""
        if not remaining.strip():
            return
        chunk = self._decode_event(remaining)
        if chunk is not None:
            yield chunk

    def _decode_event(self, event: bytes) -> StreamChunk | None:
        data_lines = []
        for line in event.splitlines():
            if line.startswith(b"data:"):
                value = line[5:]
                data_lines.append(value[1:] if value.startswith(b" ") else value)
            # Comments and event/id/retry fields carry nothing we use.

        if not data_lines:
            return None

        data = b"\n".join(data_lines)
        if self._terminated:
            self.anomalies += 1
            logger.warning("Dropping stream record after terminal chunk", anomalies=self.anomalies)
            return None

        if data.strip() == DONE_MARKER:
            self._terminated = True
            return None

        chunk = decode_chunk(data)
        self.chunks_decoded += 1
        self._track(chunk)
        return chunk.model_copy(update={"is_terminal": self._terminated})

    def _track(self, chunk: StreamChunk) -> None:
        for candidate in chunk.candidates:
            if candidate.finish_reason is None:
                self._open.add(candidate.index)
            else:
                self._open.discard(candidate.index)
                self._finished.add(candidate.index)
        if chunk.candidates and not self._open and len(self._finished) >= self._candidate_count:
            self._terminated = True
