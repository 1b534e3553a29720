import pathlib
import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
BACKEND_PATH = ROOT / "src" / "backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

from intent_gateway.core.config import Settings  # noqa: E402

TEST_KEY = "sk-test-0123456789abcdefghijklmnop"


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "OPENAI_API_KEY": None,
        "SECRET_ENDPOINT_URL": "",
        "SECRET_FETCH_RETRY_DELAY_SECONDS": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeOpenAIClient:
    """Stands in for OpenAIClient; records what the handlers send."""

    def __init__(self, content: str = "{}", text: str = "", error: Exception | None = None) -> None:
        self.content = content
        self.text = text
        self.error = error
        self.chat_calls: list[tuple[str, str]] = []
        self.transcribe_calls: list[dict[str, Any]] = []

    async def chat_json(self, system_prompt: str, user_prompt: str) -> str:
        self.chat_calls.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.content

    async def transcribe(self, audio_path: Path, filename: str, content_type: str | None = None) -> str:
        self.transcribe_calls.append(
            {
                "path": audio_path,
                "existed": audio_path.exists(),
                "bytes": audio_path.read_bytes() if audio_path.exists() else b"",
                "filename": filename,
                "content_type": content_type,
            }
        )
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_openai() -> FakeOpenAIClient:
    return FakeOpenAIClient()
