from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from intent_gateway.api import deps
from intent_gateway.schemas.errors import ErrorResponse
from intent_gateway.schemas.transcription import TranscriptionResponse
from intent_gateway.services.transcription import TranscriptionService

router = APIRouter(tags=["transcription"])
logger = logging.getLogger(__name__)

_AUDIO_UPLOAD_SCHEMA = {
    "requestBody": {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {"audio": {"type": "string", "format": "binary"}},
                }
            }
        }
    }
}


@router.post(
    "/transcribe",
    response_model=TranscriptionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra=_AUDIO_UPLOAD_SCHEMA,
)
async def transcribe(
    request: Request,
    service: TranscriptionService = Depends(deps.get_transcription_service),
):
    """Transcribe the multipart ``audio`` attachment."""
    async with request.form() as form:
        audio = form.get("audio")
        # A plain text field named "audio" is not an attachment.
        if not isinstance(audio, UploadFile):
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "no_audio"})

        try:
            text = await service.transcribe_upload(audio)
            return TranscriptionResponse(text=text)
        except Exception:
            logger.exception("Transcription failed for upload %r", audio.filename)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "transcription_failed"},
            )
