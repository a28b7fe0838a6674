"""Moderation provider settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class ModerationSettings(BaseSettings):
    model_config = {"env_prefix": "MODERATION_"}

    # Provider credentials -- required, no defaults.
    # The application fails to start if MODERATION_API_KEY or MODERATION_BASE_URL is not set.
    api_key: str = Field(min_length=1, repr=False)
    base_url: str = Field(min_length=1)

    censor_character: str = Field(default="*", min_length=1, max_length=1)

    # Per-attempt HTTP timeout and a ceiling for the whole call, retries included
    request_timeout: float = Field(default=10.0, gt=0)
    total_timeout: float = Field(default=30.0, gt=0)

    max_retries: int = Field(default=3, ge=0)
    base_delay: float = Field(default=0.5, ge=0)
    backoff_multiplier: float = Field(default=2.0, ge=1)
    max_delay: float = Field(default=8.0, ge=0)
