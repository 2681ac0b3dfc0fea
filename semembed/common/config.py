"""Configuration management for the semembed service.

This module centralizes environment-driven configuration. It builds on
``pydantic_settings.BaseSettings`` so configuration can be provided via
environment variables, ``.env`` files, or defaults.

Highlights
- Strongly-typed settings with sensible defaults
- One place to discover the ``SEMEMBED_*`` environment variables
- Model id resolution against the small set of supported models

Usage
- Inject the config in the service entrypoint: ``config = EmbeddingConfig()``
"""

from typing import Literal, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger("semembed.config")

DEFAULT_MODEL = "BAAI/bge-small-en-v1.5"

SUPPORTED_MODELS: Tuple[str, ...] = (
    "BAAI/bge-small-en-v1.5",
    "BAAI/bge-base-en-v1.5",
    "sentence-transformers/all-MiniLM-L6-v2",
)

# Names uvicorn and the stdlib both accept.
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]


class BaseConfig(BaseSettings):
    """Base configuration shared by every entrypoint.

    Field names map case-insensitively onto environment variables, so
    ``semembed_log_level`` is read from ``SEMEMBED_LOG_LEVEL``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    semembed_log_level: LogLevel = Field(default="INFO")
    semembed_log_format: LogFormat = Field(default="json")

    @field_validator("semembed_log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("semembed_log_format", mode="before")
    @classmethod
    def _lower_log_format(cls, value):
        return value.lower() if isinstance(value, str) else value


class EmbeddingConfig(BaseConfig):
    """Configuration for the embedding service.

    Adds the model selection, the listener address and engine options.
    """

    semembed_model: str = Field(default=DEFAULT_MODEL)
    semembed_host: str = Field(default="0.0.0.0")
    semembed_port: int = Field(default=8081, ge=1, le=65535)
    semembed_device: Optional[str] = Field(default=None)
    semembed_normalize_embeddings: bool = Field(default=True)

    @property
    def model_name(self) -> str:
        """The supported model id this process will load."""
        return resolve_model_name(self.semembed_model)


def resolve_model_name(requested: str) -> str:
    """Map a requested model id onto a supported one.

    Unknown ids fall back to ``DEFAULT_MODEL`` with a warning; this never
    fails so a typo in the environment cannot keep the service from starting.
    """
    if requested in SUPPORTED_MODELS:
        return requested

    logger.warning(
        "Unknown model, falling back to default",
        requested_model=requested,
        default_model=DEFAULT_MODEL,
        supported_models=list(SUPPORTED_MODELS),
    )
    return DEFAULT_MODEL
