from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from intent_gateway import __version__
from intent_gateway.api.errors import register_exception_handlers
from intent_gateway.api.router import api_router
from intent_gateway.core.config import Settings, get_settings
from intent_gateway.core.logging import configure_logging, mask_secrets
from intent_gateway.services.secrets import Credential, CredentialBootstrapError, bootstrap_credential

logger = logging.getLogger(__name__)


def create_app(settings: Settings, credential: Credential) -> FastAPI:
    """Build the HTTP app around an already-resolved credential."""
    app = FastAPI(
        title="Intent Gateway API",
        version=__version__,
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.credential = credential

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    return app


def run() -> None:
    """Resolve the OpenAI key, then serve. Exits non-zero if either step fails."""
    settings = get_settings()
    configure_logging(settings)

    try:
        credential = bootstrap_credential(settings)
    except CredentialBootstrapError as exc:
        logger.critical("%s", exc)
        sys.exit(1)
    mask_secrets([credential.value])

    try:
        app = create_app(settings, credential)
    except Exception:
        logger.critical("Failed to build the application", exc_info=True)
        sys.exit(1)

    logger.info(
        "API listening on http://%s:%d (key source: %s)",
        settings.host,
        settings.port,
        credential.source.value,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    run()
