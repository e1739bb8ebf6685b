"""URL and header resolution for service calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ...core.config.settings import ClientConfig
from ...core.exceptions import AuthFailureError

API_KEY_HEADER = "x-goog-api-key"
API_CLIENT_HEADER = "x-goog-api-client"


class Task(str, Enum):
    """Service methods the client can call."""

    GENERATE_CONTENT = "generateContent"
    STREAM_GENERATE_CONTENT = "streamGenerateContent"
    COUNT_TOKENS = "countTokens"
    LIST_MODELS = "listModels"
    GET_MODEL = "getModel"

    @property
    def is_model_method(self) -> bool:
        """Whether the task is a ``models/{model}:{task}`` custom method."""
        return self not in (Task.LIST_MODELS, Task.GET_MODEL)


@dataclass(frozen=True)
class ResolvedEndpoint:
    """Target URL and headers for one request.

    The URL never contains the credential and is safe to log.
    """

    url: str
    headers: dict[str, str] = field(default_factory=dict, repr=False)


def model_resource_name(model: str) -> str:
    """Qualify a bare model id as ``models/{id}``."""
    return model if "/" in model else f"models/{model}"


def resolve(config: ClientConfig, task: Task, model: str | None = None) -> ResolvedEndpoint:
    """Build URL and headers for a task.

    Args:
        config: Client configuration
        task: Service method to call
        model: Model id; falls back to ``config.default_model``

    Returns:
        The resolved endpoint

    Raises:
        AuthFailureError: If the configuration carries no API key
    """
    if config.api_key is None or not config.api_key.get_secret_value().strip():
        raise AuthFailureError("No API key configured")

    root = f"{config.base_url}/{config.api_version.value}"
    if task.is_model_method:
        url = f"{root}/{model_resource_name(model or config.default_model)}:{task.value}"
    elif task is Task.LIST_MODELS:
        url = f"{root}/models"
    else:
        url = f"{root}/{model_resource_name(model or config.default_model)}"

    headers = {
        **config.custom_headers,
        "Content-Type": "application/json",
        API_KEY_HEADER: config.api_key.get_secret_value(),
    }
    if config.api_client:
        headers[API_CLIENT_HEADER] = config.api_client

    return ResolvedEndpoint(url=url, headers=headers)
