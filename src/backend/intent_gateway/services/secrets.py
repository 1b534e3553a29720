from __future__ import annotations

import enum
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from intent_gateway.core.config import Settings
from intent_gateway.core.retry import retrying

logger = logging.getLogger(__name__)

# Checked in order; the first present, non-empty value wins.
SECRET_FIELD_CANDIDATES: tuple[str, ...] = (
    "openai_api_key",
    "OPENAI_API_KEY",
    "api_key",
    "apiKey",
    "apikey",
    "key",
    "token",
    "value",
    "secret",
)

# Minimum length for an unnamed string field to be taken as a key.
HEURISTIC_MIN_LENGTH = 20


class CredentialSource(str, enum.Enum):
    REMOTE = "remote"
    ENV = "env"


@dataclass(frozen=True)
class Credential:
    """The provider API key resolved at startup. Immutable for the process lifetime."""

    value: str = field(repr=False)
    source: CredentialSource


class SecretFetchError(Exception):
    """Raised when a single fetch attempt yields no usable secret."""


class CredentialBootstrapError(RuntimeError):
    """Raised when neither the remote endpoint nor the environment provides a key."""


def _candidate_object(payload: Any) -> Mapping[str, Any] | None:
    # Recognized shapes: a single object, or a non-empty array whose first item is an object.
    if isinstance(payload, list):
        if payload and isinstance(payload[0], Mapping):
            return payload[0]
        return None
    if isinstance(payload, Mapping):
        return payload
    return None


def _coerce_field(value: Any) -> str | None:
    if not value or isinstance(value, (bool, Mapping, list, tuple)):
        return None
    text = str(value).strip()
    return text or None


def extract_secret(payload: Any) -> str | None:
    """Pull a key-like string out of an untyped secret-endpoint payload.

    Named fields are tried first in ``SECRET_FIELD_CANDIDATES`` order. When none
    match, the first string longer than ``HEURISTIC_MIN_LENGTH`` characters is
    returned. That fallback is best-effort and lossy: it cannot tell a key from
    any other long string (a description, a URL) and simply takes the first one
    in field order.
    """
    candidate = _candidate_object(payload)
    if candidate is None:
        return None

    for name in SECRET_FIELD_CANDIDATES:
        value = _coerce_field(candidate.get(name))
        if value:
            return value

    for value in candidate.values():
        if isinstance(value, str) and len(value.strip()) > HEURISTIC_MIN_LENGTH:
            return value.strip()
    return None


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, (SecretFetchError, httpx.HTTPError))


class SecretResolver:
    """Fetch the provider key from a remote JSON endpoint with bounded retries."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 8.0,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.url = url.strip()
        self.timeout = timeout
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "SecretResolver":
        return cls(settings.secret_endpoint_url, timeout=settings.secret_fetch_timeout_seconds, **kwargs)

    def fetch(self) -> str:
        """Single attempt. Raises ``SecretFetchError`` or an ``httpx.HTTPError``."""
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.get(self.url, headers={"Accept": "application/json"})
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as exc:
            raise SecretFetchError("secret endpoint returned a non-JSON body") from exc

        secret = extract_secret(payload)
        if secret is None:
            raise SecretFetchError("no key-like field in secret endpoint response")
        return secret

    def resolve(self, max_attempts: int = 3, retry_delay: float = 1.5) -> str | None:
        """Return the remote secret, or ``None`` once every attempt has failed."""
        if not self.url:
            logger.info("No secret endpoint configured; skipping remote key lookup.")
            return None

        try:
            for attempt in retrying(
                max_attempts,
                retry_delay,
                _is_retryable,
                label="Secret fetch",
                sleep=self._sleep,
            ):
                with attempt:
                    return self.fetch()
        except (SecretFetchError, httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Remote secret unavailable after %d attempt(s): %s", max_attempts, exc)
        return None


def bootstrap_credential(settings: Settings, resolver: SecretResolver | None = None) -> Credential:
    """Resolve the provider key: remote endpoint first, then ``OPENAI_API_KEY``."""
    resolver = resolver or SecretResolver.from_settings(settings)

    remote_value = resolver.resolve(
        max_attempts=settings.secret_fetch_attempts,
        retry_delay=settings.secret_fetch_retry_delay_seconds,
    )
    if remote_value:
        logger.info("OpenAI key resolved from remote secret endpoint.")
        return Credential(value=remote_value, source=CredentialSource.REMOTE)

    fallback = settings.fallback_api_key
    if fallback:
        logger.warning("Remote key unavailable; using OPENAI_API_KEY from the environment.")
        return Credential(value=fallback, source=CredentialSource.ENV)

    raise CredentialBootstrapError(
        "No OpenAI key available: the remote secret endpoint failed and OPENAI_API_KEY is not set."
    )
