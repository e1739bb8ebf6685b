"""HTTP transport and endpoint resolution."""

from .endpoint import ResolvedEndpoint, Task, model_resource_name, resolve
from .transport import HttpTransport, RawResponse, StreamingResponse, map_transport_fault

__all__ = [
    "HttpTransport",
    "RawResponse",
    "StreamingResponse",
    "map_transport_fault",
    "ResolvedEndpoint",
    "Task",
    "model_resource_name",
    "resolve",
]
