from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _discover_env_files() -> tuple[str, ...]:
    """Determine which env files should be loaded."""
    files: list[str] = []

    custom_env = os.getenv("ENV_FILE")
    if custom_env and Path(custom_env).is_file():
        files.append(custom_env)

    project_root = Path(__file__).resolve().parents[4]
    dot_env = project_root / ".env"
    if dot_env.is_file():
        files.append(str(dot_env))

    cwd_env = Path.cwd() / ".env"
    if cwd_env.is_file():
        files.append(str(cwd_env.resolve()))

    return tuple(dict.fromkeys(files))  # Preserve order, remove duplicates


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_discover_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5500, alias="PORT")
    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="OPENAI_BASE_URL")
    openai_intent_model: str = Field(default="gpt-4o-mini", alias="OPENAI_INTENT_MODEL")
    openai_transcribe_model: str = Field(default="gpt-4o-mini-transcribe", alias="OPENAI_TRANSCRIBE_MODEL")
    openai_timeout_seconds: float = Field(default=60.0, gt=0, alias="OPENAI_TIMEOUT_SECONDS")
    openai_max_retries: int = Field(default=2, ge=1, alias="OPENAI_MAX_RETRIES")
    transcribe_language: str | None = Field(default=None, alias="TRANSCRIBE_LANGUAGE")

    secret_endpoint_url: str = Field(default="", alias="SECRET_ENDPOINT_URL")
    secret_fetch_timeout_seconds: float = Field(default=8.0, gt=0, alias="SECRET_FETCH_TIMEOUT_SECONDS")
    secret_fetch_attempts: int = Field(default=3, ge=1, alias="SECRET_FETCH_ATTEMPTS")
    secret_fetch_retry_delay_seconds: float = Field(default=1.5, ge=0, alias="SECRET_FETCH_RETRY_DELAY_SECONDS")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return []
            if stripped.startswith("["):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in stripped.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if str(item).strip()]
        return []

    @field_validator("openai_api_key", "transcribe_language", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def fallback_api_key(self) -> str | None:
        if self.openai_api_key is None:
            return None
        return self.openai_api_key.strip() or None


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]
