from __future__ import annotations

import logging
from typing import Any

import pytest

from conftest import TEST_KEY, make_settings
from intent_gateway import main
from intent_gateway.core.logging import SecretMaskFilter
from intent_gateway.services.secrets import CredentialSource


@pytest.fixture
def no_logging_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "configure_logging", lambda settings: None)


def test_run_exits_non_zero_without_any_credential(monkeypatch: pytest.MonkeyPatch, no_logging_config) -> None:
    monkeypatch.setattr(main, "get_settings", lambda: make_settings())
    served: list[Any] = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: served.append(args))

    with pytest.raises(SystemExit) as exc:
        main.run()

    assert exc.value.code == 1
    assert served == []


def test_run_serves_with_fallback_credential(monkeypatch: pytest.MonkeyPatch, no_logging_config) -> None:
    monkeypatch.setattr(main, "get_settings", lambda: make_settings(OPENAI_API_KEY=TEST_KEY, PORT=5600))
    served: dict[str, Any] = {}

    def fake_run(app, host: str, port: int, **kwargs: Any) -> None:
        served.update(app=app, host=host, port=port)

    monkeypatch.setattr(main.uvicorn, "run", fake_run)

    main.run()

    assert served["port"] == 5600
    assert served["app"].state.credential.source is CredentialSource.ENV
    assert served["app"].state.credential.value == TEST_KEY


def test_run_exits_when_wiring_fails(monkeypatch: pytest.MonkeyPatch, no_logging_config) -> None:
    monkeypatch.setattr(main, "get_settings", lambda: make_settings(OPENAI_API_KEY=TEST_KEY))

    def broken_create_app(settings, credential):
        raise RuntimeError("router import failed")

    monkeypatch.setattr(main, "create_app", broken_create_app)
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: pytest.fail("must not serve"))

    with pytest.raises(SystemExit) as exc:
        main.run()
    assert exc.value.code == 1


def test_secret_mask_filter_hides_credentials() -> None:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "calling with key %s", (TEST_KEY,), None)

    SecretMaskFilter([TEST_KEY]).filter(record)

    message = record.getMessage()
    assert TEST_KEY not in message
    assert message.startswith("calling with key sk-t")
