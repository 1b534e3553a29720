from __future__ import annotations

from fastapi import Depends, Request

from intent_gateway.core.config import Settings
from intent_gateway.services.intent import IntentClassifier
from intent_gateway.services.openai_client import OpenAIClient
from intent_gateway.services.secrets import Credential
from intent_gateway.services.transcription import TranscriptionService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_credential(request: Request) -> Credential:
    return request.app.state.credential


def get_openai_client(
    settings: Settings = Depends(get_app_settings),
    credential: Credential = Depends(get_credential),
) -> OpenAIClient:
    return OpenAIClient.from_settings(settings, credential)


def get_intent_classifier(client: OpenAIClient = Depends(get_openai_client)) -> IntentClassifier:
    return IntentClassifier(client)


def get_transcription_service(client: OpenAIClient = Depends(get_openai_client)) -> TranscriptionService:
    return TranscriptionService(client)
