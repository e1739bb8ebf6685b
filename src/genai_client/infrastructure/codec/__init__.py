"""Request encoding, response decoding and error classification."""

from .classifier import classify, error_status, parse_retry_after
from .decoder import StreamDecoder, decode_chunk, decode_response
from .encoder import EncodedPayload, encode, encode_count_tokens, validate_generation_config

__all__ = [
    "EncodedPayload",
    "encode",
    "encode_count_tokens",
    "validate_generation_config",
    "StreamDecoder",
    "decode_chunk",
    "decode_response",
    "classify",
    "error_status",
    "parse_retry_after",
]
