"""
Pytest configuration and fixtures for nova-client-core tests.
"""

import io
import logging
import uuid

import pytest
import responses as responses_lib

from nova_client.compute import ComputeClient
from nova_client.core.config import MAX_SEND_ATTEMPTS, ClientConfig
from nova_client.core.http_client import HTTPClient
from nova_client.core.logging.config import LoggingConfig
from nova_client.testservices import NovaService, NovaServiceHTTP

RETRY_LINE = "Too many requests, retrying in"


class LogCapture:
    """Plain stdlib logger writing bare messages into a buffer."""

    def __init__(self):
        self.stream = io.StringIO()
        self.handler = logging.StreamHandler(self.stream)
        self.handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        self.logger = logging.getLogger(f"nova_client.tests.{uuid.uuid4().hex}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.logger.addHandler(self.handler)

    @property
    def output(self) -> str:
        return self.stream.getvalue()

    def count(self, text: str = RETRY_LINE) -> int:
        return self.output.count(text)

    def close(self):
        self.logger.removeHandler(self.handler)
        self.handler.close()


@pytest.fixture
def base_url():
    """Compute endpoint for responses-based tests."""
    return "https://compute.example.com/v2/tenant"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def log_capture():
    capture = LogCapture()
    yield capture
    capture.close()


@pytest.fixture
def fast_config(base_url):
    """Client config without real backoff delays."""
    return ClientConfig.create(
        base_url=base_url,
        auth_token="test-token-123",
        max_attempts=MAX_SEND_ATTEMPTS,
        backoff=lambda attempt: 0.0,
    )


@pytest.fixture
def client(fast_config, log_capture):
    """HTTP client instance for testing."""
    client = HTTPClient(fast_config, logger=log_capture.logger)
    yield client
    client.close()


@pytest.fixture(params=[True, False], ids=["numeric-ids", "string-ids"])
def nova_service(request):
    """Simulated compute service in both id modes."""
    return NovaService(use_numeric_ids=request.param)


@pytest.fixture
def nova_double(nova_service):
    return NovaServiceHTTP(nova_service)


@pytest.fixture
def nova_http(nova_double, log_capture):
    """HTTPClient wired to the simulated service."""
    config = ClientConfig.create(
        base_url=nova_double.base_url,
        auth_token="test-token-123",
        backoff=lambda attempt: 0.0,
    )
    http = HTTPClient(
        config,
        logger=log_capture.logger,
        adapters={nova_double.base_url: nova_double.requests_adapter()},
    )
    yield http
    http.close()


@pytest.fixture
def compute(nova_http):
    return ComputeClient(nova_http)


@pytest.fixture
def logging_config():
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "nova.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
