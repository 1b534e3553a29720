from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Protocol

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".webm"


class TranscriptionClient(Protocol):
    async def transcribe(self, audio_path: Path, filename: str, content_type: str | None = None) -> str: ...


class TranscriptionService:
    """Stage an uploaded clip on disk and hand it to the transcription provider."""

    def __init__(self, client: TranscriptionClient) -> None:
        self.client = client

    async def transcribe_upload(self, upload: UploadFile) -> str:
        original_name = Path(upload.filename or "").name
        suffix = Path(original_name).suffix or DEFAULT_SUFFIX
        filename = original_name or f"audio{suffix}"

        # Each request gets its own directory; it is removed however the call exits.
        with tempfile.TemporaryDirectory(prefix="intent-gateway-") as tmp_dir:
            audio_path = Path(tmp_dir) / f"input{suffix}"
            audio_bytes = await upload.read()
            await run_in_threadpool(audio_path.write_bytes, audio_bytes)
            logger.debug("Staged %d bytes of audio at %s", len(audio_bytes), audio_path)
            text = await self.client.transcribe(audio_path, filename, upload.content_type)
        return text if isinstance(text, str) else ""
