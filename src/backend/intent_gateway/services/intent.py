"""Intent classification delegated to an OpenAI chat model.

The model only proposes a command. Whatever it returns is checked against the
caller's command list before it leaves the service, so a hallucinated label
can never reach the client.
"""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Protocol, Sequence

from intent_gateway.schemas.intent import IntentRequest, IntentResponse

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5

SYSTEM_PROMPT = "You are an intent classifier that returns strict JSON."


class ChatJSONClient(Protocol):
    async def chat_json(self, system_prompt: str, user_prompt: str) -> str: ...


def build_intent_prompt(text: str, commands: Sequence[str]) -> str:
    return (
        f'User text: "{text}". '
        f"Choose the command that best applies from this EXACT list: {', '.join(commands)}. "
        'Return only a JSON object: {"command":"<one of the list>","confidence":<0..1>}'
    )


def parse_model_output(content: str | None) -> dict[str, Any]:
    """Decode the model's JSON; anything unreadable counts as an empty result."""
    if not content:
        return {}
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Intent model returned non-JSON content; treating as empty result")
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def select_command(value: Any, commands: Sequence[str]) -> str | None:
    if isinstance(value, str) and value in commands:
        return value
    return None


def normalize_confidence(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return DEFAULT_CONFIDENCE
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if not math.isfinite(confidence):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, confidence))


class IntentClassifier:
    def __init__(self, client: ChatJSONClient) -> None:
        self.client = client

    async def classify(self, request: IntentRequest) -> IntentResponse:
        content = await self.client.chat_json(
            SYSTEM_PROMPT,
            build_intent_prompt(request.text, request.commands),
        )
        data = parse_model_output(content)

        command = select_command(data.get("command"), request.commands)
        if command is None and data.get("command") is not None:
            logger.info("Discarding command %r: not in the allowed list", data.get("command"))

        return IntentResponse(
            command=command,
            confidence=normalize_confidence(data.get("confidence")),
        )
