from intent_gateway.schemas.errors import ErrorResponse
from intent_gateway.schemas.health import HealthStatus
from intent_gateway.schemas.intent import IntentRequest, IntentResponse
from intent_gateway.schemas.transcription import TranscriptionResponse

__all__ = [
    "ErrorResponse",
    "HealthStatus",
    "IntentRequest",
    "IntentResponse",
    "TranscriptionResponse",
]
