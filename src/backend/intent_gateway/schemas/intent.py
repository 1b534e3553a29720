from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, StrictStr


class IntentRequest(BaseModel):
    """Free text plus the closed set of commands it may be mapped to."""

    text: StrictStr = Field(..., description="User utterance to classify; may be empty.")
    commands: list[StrictStr] = Field(..., min_length=1, description="Allowed command labels.")


class IntentResponse(BaseModel):
    command: str | None = Field(default=None, description="Chosen command, or null when none of the commands fit.")
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    source: Literal["openai"] = "openai"
