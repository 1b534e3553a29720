from __future__ import annotations

import pytest

from intent_gateway.core.retry import retrying


class Flaky(Exception):
    pass


def test_retrying_stops_after_attempt_budget_and_reraises():
    calls = 0
    sleeps: list[float] = []

    with pytest.raises(Flaky):
        for attempt in retrying(3, 0.25, sleep=sleeps.append):
            with attempt:
                calls += 1
                raise Flaky("still down")

    assert calls == 3
    assert sleeps == [0.25, 0.25]


def test_retrying_does_not_retry_when_predicate_rejects():
    calls = 0

    with pytest.raises(ValueError):
        for attempt in retrying(5, 0, lambda exc: isinstance(exc, Flaky), sleep=lambda _: None):
            with attempt:
                calls += 1
                raise ValueError("permanent")

    assert calls == 1


def test_retrying_returns_first_success():
    outcomes = iter([Flaky("once"), "ok"])
    result = None

    for attempt in retrying(3, 0, sleep=lambda _: None):
        with attempt:
            outcome = next(outcomes)
            if isinstance(outcome, Exception):
                raise outcome
            result = outcome

    assert result == "ok"


def test_retrying_rejects_zero_attempts():
    with pytest.raises(ValueError):
        retrying(0, 1.0)
