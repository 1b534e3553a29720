from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from intent_gateway.api import deps
from intent_gateway.schemas.errors import ErrorResponse
from intent_gateway.schemas.intent import IntentRequest, IntentResponse
from intent_gateway.services.intent import IntentClassifier

router = APIRouter(tags=["intent"])
logger = logging.getLogger(__name__)


@router.post(
    "/intent",
    response_model=IntentResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def classify_intent(
    payload: IntentRequest,
    classifier: IntentClassifier = Depends(deps.get_intent_classifier),
):
    """Map ``text`` onto one of ``commands``; malformed bodies are rejected as ``bad_request``."""
    try:
        return await classifier.classify(payload)
    except Exception:
        logger.exception("Intent classification failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "intent_failed"},
        )
