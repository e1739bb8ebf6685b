"""Client configuration for the generative AI client."""

from __future__ import annotations

from enum import Enum
from typing import Any

from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-1.5-flash"


class ApiVersion(str, Enum):
    """Supported API versions."""

    V1 = "v1"
    V1BETA = "v1beta"


class RetryPolicy(BaseModel):
    """Bounds for the retry/backoff controller."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, le=10, description="Total attempts per logical call")
    base_delay: float = Field(default=1.0, gt=0.0, description="Delay in seconds after the first failed attempt")
    max_delay: float = Field(default=30.0, gt=0.0, description="Upper bound for a single backoff delay")
    jitter: bool = Field(default=False, description="Randomize each delay by up to 25%")

    @field_validator("max_delay")
    @classmethod
    def validate_max_delay(cls, v: float, info: Any) -> float:
        """Ensure the cap is not below the base delay."""
        base_delay = info.data.get("base_delay") if info.data else None
        if base_delay is not None and v < base_delay:
            raise ValueError("max_delay must be greater than or equal to base_delay")
        return v


class ClientConfig(BaseModel):
    """Immutable configuration shared by every call made through one client."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr | None = Field(default=None, description="API key sent in the x-goog-api-key header")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Service root URL")
    api_version: ApiVersion = Field(default=ApiVersion.V1BETA, description="API version path segment")
    default_model: str = Field(default=DEFAULT_MODEL, min_length=1, description="Model used when a request names none")
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    timeout: float = Field(default=60.0, gt=0.0, description="Request timeout in seconds")
    custom_headers: dict[str, str] = Field(default_factory=dict, description="Extra headers sent with every request")
    api_client: str | None = Field(default=None, description="Value for the x-goog-api-client header")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL."""
        return v.rstrip("/")

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump configuration without exposing the credential."""
        data = self.model_dump(mode="json")
        if self.api_key is not None:
            data["api_key"] = "***masked***"
        return data


class ClientSettings(BaseSettings):
    """Client settings loaded from environment variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="GENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    API_KEY: SecretStr | None = Field(default=None, validation_alias=AliasChoices("GENAI_API_KEY", "GOOGLE_API_KEY"))
    BASE_URL: str = Field(default=DEFAULT_BASE_URL)
    API_VERSION: ApiVersion = Field(default=ApiVersion.V1BETA)
    MODEL: str = Field(default=DEFAULT_MODEL)
    TIMEOUT: float = Field(default=60.0, gt=0.0, le=600.0)

    # Retry Configuration
    RETRY_MAX_ATTEMPTS: int = Field(default=3, ge=1, le=10)
    RETRY_BASE_DELAY: float = Field(default=1.0, gt=0.0)
    RETRY_MAX_DELAY: float = Field(default=30.0, gt=0.0)
    RETRY_JITTER: bool = Field(default=False)

    def to_client_config(self) -> ClientConfig:
        """Build the immutable client configuration."""
        return ClientConfig(
            api_key=self.API_KEY,
            base_url=self.BASE_URL,
            api_version=self.API_VERSION,
            default_model=self.MODEL,
            timeout=self.TIMEOUT,
            retry=RetryPolicy(
                max_attempts=self.RETRY_MAX_ATTEMPTS,
                base_delay=self.RETRY_BASE_DELAY,
                max_delay=self.RETRY_MAX_DELAY,
                jitter=self.RETRY_JITTER,
            ),
        )

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump settings without exposing secrets."""
        data = self.model_dump()
        if data.get("API_KEY"):
            data["API_KEY"] = "***masked***"
        return data


def load_client_config(env_file: str | None = ".env") -> ClientConfig:
    """Load a ``ClientConfig`` from the environment.

    Args:
        env_file: Optional dotenv file merged into the process environment first

    Returns:
        Configuration built from ``GENAI_*`` variables
    """
    if env_file:
        load_dotenv(env_file)
    return ClientSettings().to_client_config()
