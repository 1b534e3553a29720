"""OpenAI HTTP client for chat completions and audio transcription."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import httpx
from starlette.concurrency import run_in_threadpool

from intent_gateway.core.config import Settings
from intent_gateway.core.retry import async_retrying
from intent_gateway.services.secrets import Credential

logger = logging.getLogger(__name__)


class OpenAIResponseError(Exception):
    """Raised when the provider returns an envelope we cannot read."""


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        return status_code == 429 or status_code >= 500
    return isinstance(exc, httpx.RequestError)


class OpenAIClient:
    """Async OpenAI client bound to a single credential."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openai.com/v1",
        intent_model: str = "gpt-4o-mini",
        transcribe_model: str = "gpt-4o-mini-transcribe",
        language: Optional[str] = None,
        timeout: float = 60.0,
        max_attempts: int = 2,
        retry_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.intent_model = intent_model
        self.transcribe_model = transcribe_model
        self.language = language
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, credential: Credential, **kwargs: Any) -> "OpenAIClient":
        return cls(
            credential.value,
            base_url=settings.openai_base_url,
            intent_model=settings.openai_intent_model,
            transcribe_model=settings.openai_transcribe_model,
            language=settings.transcribe_language,
            timeout=settings.openai_timeout_seconds,
            max_attempts=settings.openai_max_retries,
            **kwargs,
        )

    async def _post(self, path: str, **request_kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        async for attempt in async_retrying(
            self.max_attempts,
            self.retry_delay,
            _is_retryable,
            label=f"OpenAI {path}",
        ):
            with attempt:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    response = await client.post(
                        url,
                        headers={"Authorization": f"Bearer {self.api_key}"},
                        **request_kwargs,
                    )
                if response.status_code == 429:
                    logger.warning("OpenAI rate limit hit on %s", path)
                response.raise_for_status()
                return response.json()
        raise AssertionError("unreachable")  # pragma: no cover

    async def chat_json(self, system_prompt: str, user_prompt: str) -> str:
        """Run a deterministic JSON-mode chat completion and return the raw message content."""
        response = await self._post(
            "/chat/completions",
            json={
                "model": self.intent_model,
                "temperature": 0.0,
                "response_format": {"type": "json_object"},
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            },
        )
        try:
            content = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise OpenAIResponseError("chat completion response has no message content") from exc
        return content or ""

    async def transcribe(self, audio_path: Path, filename: str, content_type: Optional[str] = None) -> str:
        """Send an audio file to the transcription endpoint and return its text."""
        audio_bytes = await run_in_threadpool(audio_path.read_bytes)
        data = {"model": self.transcribe_model}
        if self.language:
            data["language"] = self.language

        response = await self._post(
            "/audio/transcriptions",
            data=data,
            files={"file": (filename, audio_bytes, content_type or "application/octet-stream")},
        )
        if not isinstance(response, dict):
            raise OpenAIResponseError("transcription response is not a JSON object")
        text = response.get("text")
        return text if isinstance(text, str) else ""
