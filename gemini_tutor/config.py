"""Endpoint configuration loaded from the environment.

Only the endpoint adapter reads these settings. Retry behaviour is never
configured here: callers pass a ``RetryPolicy`` per call.

Environment variables use the ``GEMINI_`` prefix:

- ``GEMINI_API_KEY``: Google Gemini API key
- ``GEMINI_MODEL``: model identifier
- ``GEMINI_USE_REAL_API``: call the real API instead of the mock endpoint
- ``GEMINI_TIMEOUT_SECONDS``: per-request HTTP timeout
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_MODEL, DEFAULT_TIMEOUT_SECONDS
from .exceptions import MissingKeyError

log = logging.getLogger(__name__)


class TutorSettings(BaseSettings):
    """Pydantic settings schema for the Gemini endpoint."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Gemini model identifier",
        min_length=1,
    )

    use_real_api: bool = Field(
        default=False,
        description="Use the real API instead of the deterministic mock endpoint",
    )

    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        description="Per-request HTTP timeout in seconds",
        gt=0,
    )

    @model_validator(mode="after")
    def validate_api_key_requirement(self) -> "TutorSettings":
        """Ensure api_key is provided when use_real_api is True."""
        if self.use_real_api and not self.api_key:
            raise ValueError(
                "api_key is required when use_real_api=True. "
                "Set GEMINI_API_KEY environment variable or pass it programmatically."
            )
        return self

    def get_summary(self) -> dict[str, Any]:
        """Configuration summary for debugging, with the key redacted"""
        return {
            "model": self.model,
            "use_real_api": self.use_real_api,
            "timeout_seconds": self.timeout_seconds,
            "api_key": "[SET]" if self.api_key else "[NOT SET]",
        }


def load_settings(
    env_file: str | Path | None = None, **overrides: Any
) -> TutorSettings:
    """Load settings from the environment, an optional .env file and overrides.

    Raises:
        MissingKeyError: If the real API is requested without an API key.
        ValueError: For any other invalid value.
    """
    try:
        settings = TutorSettings(_env_file=env_file, **overrides)
    except ValidationError as e:
        messages = [str(err.get("msg", "")) for err in e.errors()]
        if any("api_key is required" in msg for msg in messages):
            raise MissingKeyError(
                "API Key is missing. Set GEMINI_API_KEY or disable use_real_api."
            ) from e
        raise ValueError(f"Invalid configuration: {e}") from e

    log.debug("Loaded settings: %s", settings.get_summary())
    return settings
