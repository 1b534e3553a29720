from fastapi import APIRouter

from .routes import health, intent, transcription

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(transcription.router)
api_router.include_router(intent.router)
