"""
Симулятор compute сервиса для тестов.

Example:
    >>> service = NovaService(use_numeric_ids=True)
    >>> double = NovaServiceHTTP(service)
    >>> http = HTTPClient(config, adapters={double.base_url: double.requests_adapter()})
    >>> with control_point(service, "add_floating_ip", fail_always(no_more_floating_ips)):
    ...     ComputeClient(http).allocate_floating_ip()
"""

from .control import (
    ControlProcessor,
    FailingProcessor,
    ServiceControl,
    control_point,
    fail_always,
    fail_times,
)
from .errors import (
    ServerError,
    bad_request,
    ip_limit_exceeded,
    no_more_floating_ips,
    not_found,
    rate_limit_exceeded,
)
from .http_double import DEFAULT_BASE_URL, NovaServiceAdapter, NovaServiceHTTP
from .novaservice import NovaService

__all__ = [
    "ServiceControl",
    "ControlProcessor",
    "FailingProcessor",
    "control_point",
    "fail_always",
    "fail_times",
    "ServerError",
    "no_more_floating_ips",
    "ip_limit_exceeded",
    "bad_request",
    "not_found",
    "rate_limit_exceeded",
    "NovaService",
    "NovaServiceHTTP",
    "NovaServiceAdapter",
    "DEFAULT_BASE_URL",
]
