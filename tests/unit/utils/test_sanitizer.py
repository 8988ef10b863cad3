"""Тесты маскирования чувствительных данных."""

import pytest

from nova_client.utils.sanitizer import is_sensitive_key, mask_sensitive_data


@pytest.mark.parametrize("key", ["X-Auth-Token", "auth_token", "password", "api_key", "Authorization"])
def test_sensitive_keys(key):
    assert is_sensitive_key(key)


@pytest.mark.parametrize("key", ["resource_kind", "url", "attempt", "wait_ms", "max_attempts"])
def test_regular_keys(key):
    assert not is_sensitive_key(key)


def test_mask_headers():
    masked = mask_sensitive_data({"X-Auth-Token": "gAAAAB", "Accept": "application/json"})
    assert masked == {"X-Auth-Token": "***REDACTED***", "Accept": "application/json"}


def test_mask_nested():
    data = {"request": {"headers": {"X-Auth-Token": "abc"}, "items": [{"password": "p"}]}}
    masked = mask_sensitive_data(data)
    assert masked["request"]["headers"]["X-Auth-Token"] == "***REDACTED***"
    assert masked["request"]["items"][0]["password"] == "***REDACTED***"
    # Оригинал не меняется
    assert data["request"]["headers"]["X-Auth-Token"] == "abc"


@pytest.mark.parametrize("text,secret", [
    ("X-Auth-Token: gAAAAB123", "gAAAAB123"),
    ("Authorization: Bearer eyJhbGciOi", "eyJhbGciOi"),
    ("https://compute/v2?token=abc123&x=1", "abc123"),
    ("password=hunter2", "hunter2"),
])
def test_mask_strings(text, secret):
    assert secret not in mask_sensitive_data(text)


def test_passthrough_scalars():
    assert mask_sensitive_data(3) == 3
    assert mask_sensitive_data(None) is None
    assert mask_sensitive_data(("a", "b")) == ("a", "b")


def test_custom_mask():
    assert mask_sensitive_data({"token": "x"}, mask="<hidden>") == {"token": "<hidden>"}
