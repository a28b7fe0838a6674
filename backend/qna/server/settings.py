"""Q&A server configuration via environment variables."""

import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode


class QnaServerSettings(BaseSettings):
    model_config = {"env_prefix": "QNA_"}

    log_dir: str = "backend/logs/qna"
    cors_origins: Annotated[list[str], NoDecode] = []

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Accept a list, a JSON array string, or a comma-separated string."""
        if isinstance(v, list):
            return v
        stripped = v.strip()
        if stripped.startswith("["):
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON array: {e}") from e
            if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
                raise ValueError("JSON value must be an array of strings")
            return parsed
        return [origin.strip() for origin in stripped.split(",") if origin.strip()]
