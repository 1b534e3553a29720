from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Iterable

from .config import Settings, get_settings


def _mask_secret(secret: str, visible: int = 4) -> str:
    secret = secret.strip()
    if not secret:
        return secret
    if len(secret) <= visible:
        return "*" * len(secret)
    return f"{secret[:visible]}{'*' * (len(secret) - visible)}"


class SecretMaskFilter(logging.Filter):
    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets: list[str] = []
        self.add_secrets(secrets)

    def add_secrets(self, secrets: Iterable[str]) -> None:
        for secret in secrets:
            secret_value = (secret or "").strip()
            if secret_value and secret_value not in self._secrets:
                self._secrets.append(secret_value)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        sanitized = message
        for secret in self._secrets:
            sanitized = sanitized.replace(secret, _mask_secret(secret))
        if sanitized != message:
            record.msg = sanitized
            record.args = ()
        return True


_mask_filter = SecretMaskFilter()


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s"}
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                }
            },
            "root": {"level": settings.log_level.upper(), "handlers": ["console"]},
        }
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # Handler-level so records propagated from module loggers are masked too.
    for handler in logging.getLogger().handlers:
        handler.addFilter(_mask_filter)
    mask_secrets([settings.fallback_api_key or ""])


def mask_secrets(secrets: Iterable[str]) -> None:
    """Register additional values to be masked in every log line."""
    _mask_filter.add_secrets(secrets)
