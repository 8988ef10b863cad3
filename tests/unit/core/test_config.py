"""Тесты конфигурации."""

from dataclasses import FrozenInstanceError

import pytest

from nova_client.core.config import (
    AUTH_TOKEN_HEADER,
    MAX_SEND_ATTEMPTS,
    ClientConfig,
    RetryConfig,
    TimeoutConfig,
)


def test_timeout_defaults():
    timeout = TimeoutConfig()
    assert timeout.as_tuple() == (5, 30)


@pytest.mark.parametrize("kwargs", [{"connect": 0}, {"read": -1}])
def test_timeout_validation(kwargs):
    with pytest.raises(ValueError):
        TimeoutConfig(**kwargs)


def test_retry_defaults():
    retry = RetryConfig()
    assert retry.max_attempts == MAX_SEND_ATTEMPTS == 3
    assert retry.respect_retry_after is True
    assert retry.backoff is None


@pytest.mark.parametrize("kwargs,match", [
    ({"max_attempts": 0}, "max_attempts"),
    ({"backoff_base": -1}, "backoff_base"),
    ({"backoff_factor": 0.5}, "backoff_factor"),
    ({"backoff_max": -1}, "backoff_max"),
    ({"retry_after_max": -1}, "retry_after_max"),
    ({"backoff": 5}, "callable"),
])
def test_retry_validation(kwargs, match):
    with pytest.raises(ValueError, match=match):
        RetryConfig(**kwargs)


def test_retry_config_is_frozen():
    retry = RetryConfig()
    with pytest.raises(FrozenInstanceError):
        retry.max_attempts = 10


class TestClientConfig:

    def test_create_with_token(self):
        config = ClientConfig.create("https://compute.example.com/v2/tenant/", auth_token="abc")
        assert config.base_url == "https://compute.example.com/v2/tenant"
        assert config.headers[AUTH_TOKEN_HEADER] == "abc"
        assert config.auth_token == "abc"

    def test_create_without_token(self):
        config = ClientConfig.create("https://compute.example.com")
        assert config.auth_token is None
        assert AUTH_TOKEN_HEADER not in config.headers

    def test_create_timeout_variants(self):
        assert ClientConfig.create(timeout=10).timeout == TimeoutConfig(connect=5, read=10)
        assert ClientConfig.create(timeout=(2, 4)).timeout == TimeoutConfig(connect=2, read=4)
        custom = TimeoutConfig(connect=1, read=2)
        assert ClientConfig.create(timeout=custom).timeout is custom

    def test_create_retry(self):
        backoff = lambda attempt: 0.1 * attempt  # noqa: E731
        config = ClientConfig.create(max_attempts=5, backoff=backoff)
        assert config.retry.max_attempts == 5
        assert config.retry.backoff is backoff

    def test_headers_are_immutable(self):
        config = ClientConfig.create(headers={"X-Test": "1"})
        with pytest.raises(TypeError):
            config.headers["X-Test"] = "2"

    def test_config_is_frozen(self):
        config = ClientConfig()
        with pytest.raises(FrozenInstanceError):
            config.base_url = "https://other"

    def test_with_retry(self):
        config = ClientConfig.create("https://compute.example.com", auth_token="abc")
        updated = config.with_retry(RetryConfig(max_attempts=7))
        assert updated.retry.max_attempts == 7
        assert updated.auth_token == "abc"
        assert config.retry.max_attempts == MAX_SEND_ATTEMPTS

    def test_with_headers(self):
        config = ClientConfig.create(auth_token="abc")
        updated = config.with_headers({"X-Extra": "1"})
        assert updated.headers["X-Extra"] == "1"
        assert updated.auth_token == "abc"
        assert "X-Extra" not in config.headers
