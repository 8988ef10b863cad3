"""Тесты RetryEngine."""

import logging
import re
from unittest.mock import Mock

import pytest

from nova_client.core.config import RetryConfig
from nova_client.core.context import RequestContext, RetryState
from nova_client.core.exceptions import (
    FaultError,
    MaxAttemptsExceededError,
    NotFoundError,
    QuotaExceededError,
    RateLimitedError,
    ResourceExhaustedError,
)
from nova_client.core.logging import NovaClientLogger
from nova_client.core.retry_engine import RETRY_NOTICE, RetryEngine

URL = "https://compute.example.com/v2/tenant/os-security-groups/1"


def make_engine(max_attempts=3, sink=None, **retry_kwargs):
    sleeps = []
    retry_kwargs.setdefault("backoff", lambda attempt: 0.0)
    engine = RetryEngine(
        RetryConfig(max_attempts=max_attempts, **retry_kwargs),
        logger=sink,
        sleep=sleeps.append,
    )
    return engine, sleeps


@pytest.fixture
def context():
    return RequestContext("DELETE", URL, resource_kind="security group", resource_id="1")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОСНОВНОЙ КОНТРАКТ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_success_first_attempt():
    engine, sleeps = make_engine()
    call = Mock(return_value="ok")

    assert engine.execute(call) == "ok"
    assert call.call_count == 1
    assert sleeps == []


@pytest.mark.parametrize("failures", [1, 2])
def test_rate_limited_then_success(failures, log_capture, context):
    """N < max_attempts: успех и ровно N строк о retry."""
    engine, sleeps = make_engine(max_attempts=3, sink=log_capture.logger)
    call = Mock(side_effect=[RateLimitedError()] * failures + ["ok"])

    assert engine.execute(call, context) == "ok"
    assert call.call_count == failures + 1
    assert len(sleeps) == failures
    assert log_capture.count("Too many requests, retrying in") == failures


def test_rate_limited_exhausted(context):
    """N == max_attempts: MaxAttemptsExceededError и ровно max_attempts попыток."""
    engine, sleeps = make_engine(max_attempts=3)
    call = Mock(side_effect=[RateLimitedError() for _ in range(3)])

    with pytest.raises(MaxAttemptsExceededError) as exc_info:
        engine.execute(call, context)

    assert call.call_count == 3
    assert len(sleeps) == 2
    assert re.search("maximum number of attempts", str(exc_info.value), re.IGNORECASE)
    assert isinstance(exc_info.value, FaultError)
    assert isinstance(exc_info.value.__cause__, RateLimitedError)
    assert exc_info.value.last_error is exc_info.value.__cause__
    assert URL in str(exc_info.value)


def test_exhaustion_logs_error_line(log_capture):
    engine, _ = make_engine(max_attempts=2, sink=log_capture.logger)
    call = Mock(side_effect=[RateLimitedError(), RateLimitedError()])

    with pytest.raises(MaxAttemptsExceededError):
        engine.execute(call)

    assert log_capture.count() == 1
    assert "ERROR Maximum number of attempts reached" in log_capture.output


def test_single_attempt_never_sleeps():
    engine, sleeps = make_engine(max_attempts=1)
    call = Mock(side_effect=RateLimitedError())

    with pytest.raises(MaxAttemptsExceededError, match=r"\(1\)"):
        engine.execute(call)
    assert call.call_count == 1
    assert sleeps == []


@pytest.mark.parametrize("error", [
    ResourceExhaustedError("floating ip"),
    QuotaExceededError("floating ip"),
    NotFoundError("security group", "1"),
    FaultError("Unexpected API Error.", status_code=500),
])
def test_other_errors_not_retried(error, log_capture):
    engine, sleeps = make_engine(max_attempts=5, sink=log_capture.logger)
    call = Mock(side_effect=error)

    with pytest.raises(type(error)) as exc_info:
        engine.execute(call)

    assert exc_info.value is error
    assert call.call_count == 1
    assert sleeps == []
    assert log_capture.count() == 0


def test_non_classified_errors_propagate():
    engine, _ = make_engine()
    call = Mock(side_effect=KeyError("boom"))

    with pytest.raises(KeyError):
        engine.execute(call)
    assert call.call_count == 1


def test_state_is_per_call():
    """Каждый вызов получает полный бюджет попыток."""
    engine, _ = make_engine(max_attempts=3)

    for _ in range(3):
        call = Mock(side_effect=[RateLimitedError(), RateLimitedError(), "ok"])
        assert engine.execute(call) == "ok"


def test_silent_without_sink(caplog):
    engine, sleeps = make_engine()
    call = Mock(side_effect=[RateLimitedError(), "ok"])

    with caplog.at_level(logging.WARNING):
        assert engine.execute(call) == "ok"

    assert RETRY_NOTICE.split("{")[0] not in caplog.text
    assert len(sleeps) == 1


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BACKOFF
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_exponential_backoff_non_decreasing():
    engine = RetryEngine(RetryConfig(backoff_base=1.0, backoff_factor=2.0, backoff_max=5.0))
    waits = [engine.get_wait_time(attempt) for attempt in range(1, 6)]

    assert waits == [1.0, 2.0, 4.0, 5.0, 5.0]
    assert waits == sorted(waits)


def test_custom_backoff_function():
    engine = RetryEngine(RetryConfig(backoff=lambda attempt: attempt * 0.25))
    assert engine.get_wait_time(1) == 0.25
    assert engine.get_wait_time(3) == 0.75


def test_retry_after_hint_overrides_backoff():
    engine = RetryEngine(RetryConfig(backoff=lambda attempt: 0.0))
    assert engine.get_wait_time(1, RateLimitedError(retry_after=7)) == 7.0


def test_retry_after_hint_capped():
    engine = RetryEngine(RetryConfig(retry_after_max=3))
    assert engine.get_wait_time(1, RateLimitedError(retry_after=3600)) == 3.0


def test_retry_after_ignored_when_disabled():
    engine = RetryEngine(RetryConfig(backoff=lambda attempt: 0.5, respect_retry_after=False))
    assert engine.get_wait_time(1, RateLimitedError(retry_after=30)) == 0.5


def test_no_hint_falls_back_to_backoff():
    engine = RetryEngine(RetryConfig(backoff_base=2.0))
    assert engine.get_wait_time(1, RateLimitedError()) == 2.0


def test_sleeps_use_wait_times(log_capture):
    engine, sleeps = make_engine(
        max_attempts=3,
        sink=log_capture.logger,
        backoff=None,
        backoff_base=0.5,
        backoff_factor=2.0,
    )
    call = Mock(side_effect=[RateLimitedError(), RateLimitedError(), "ok"])

    engine.execute(call)

    assert sleeps == [0.5, 1.0]
    assert "Too many requests, retrying in 500ms" in log_capture.output
    assert "Too many requests, retrying in 1000ms" in log_capture.output


def test_should_retry():
    engine, _ = make_engine(max_attempts=2)
    assert engine.should_retry(RateLimitedError(), RetryState(attempt=1)) is True
    assert engine.should_retry(RateLimitedError(), RetryState(attempt=2)) is False
    assert engine.should_retry(NotFoundError(), RetryState(attempt=1)) is False


def test_structured_fields_on_retry_record():
    records = []

    class Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    std = logging.getLogger("nova_client.tests.retry_fields")
    std.setLevel(logging.DEBUG)
    std.propagate = False
    handler = Collect()
    std.addHandler(handler)
    try:
        engine, _ = make_engine(max_attempts=3, sink=NovaClientLogger.wrap(std))
        engine.execute(Mock(side_effect=[RateLimitedError(), "ok"]))
    finally:
        std.removeHandler(handler)

    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert records[0].attempt == 1
    assert records[0].max_attempts == 3
    assert records[0].wait_ms == 0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ASYNC
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def make_async_engine(max_attempts=3, sink=None):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    engine = RetryEngine(
        RetryConfig(max_attempts=max_attempts, backoff=lambda attempt: 0.1),
        logger=sink,
        async_sleep=fake_sleep,
    )
    return engine, sleeps


def async_call(outcomes):
    calls = []

    async def call():
        calls.append(1)
        outcome = outcomes[len(calls) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return call, calls


@pytest.mark.asyncio
async def test_async_rate_limited_then_success(log_capture):
    engine, sleeps = make_async_engine(sink=log_capture.logger)
    call, calls = async_call([RateLimitedError(), RateLimitedError(), "ok"])

    assert await engine.async_execute(call) == "ok"
    assert len(calls) == 3
    assert sleeps == [0.1, 0.1]
    assert log_capture.count("Too many requests, retrying in 100ms") == 2


@pytest.mark.asyncio
async def test_async_exhausted():
    engine, _ = make_async_engine(max_attempts=2)
    call, calls = async_call([RateLimitedError(), RateLimitedError()])

    with pytest.raises(MaxAttemptsExceededError, match="Maximum number of attempts"):
        await engine.async_execute(call)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_async_not_found_not_retried():
    engine, sleeps = make_async_engine()
    call, calls = async_call([NotFoundError("security group", "1")])

    with pytest.raises(NotFoundError):
        await engine.async_execute(call)
    assert len(calls) == 1
    assert sleeps == []
