"""
REST-обвязка симулятора: маршрутизация compute API поверх NovaService.

Симулятор подключается к транспортам без сети:
- HTTPClient: ``adapters={double.base_url: double.requests_adapter()}``
- AsyncHTTPClient: ``transport=double.httpx_transport()``
"""

import json
import logging
import re
import threading
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import httpx
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from .errors import ServerError, bad_request
from .novaservice import NovaService

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://nova.test/v2/tenant"

JSON_HEADERS = {"Content-Type": "application/json"}

# (status, headers, body)
WireResponse = Tuple[int, Dict[str, str], bytes]


def _json_response(status: int, payload: Any = None) -> WireResponse:
    if payload is None:
        return status, {}, b""
    return status, dict(JSON_HEADERS), json.dumps(payload).encode("utf-8")


def _fault_response(error: ServerError) -> WireResponse:
    return error.status, error.headers(), json.dumps(error.body()).encode("utf-8")


def _reason_phrase(status: int) -> str:
    # Провайдер может вернуть нестандартный код (520 и т.п.)
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


class NovaServiceHTTP:
    """
    HTTP фасад NovaService.

    Routes:
        GET/POST     /os-security-groups
        GET/DELETE   /os-security-groups/{id}
        GET/POST     /os-floating-ips
        GET/DELETE   /os-floating-ips/{id}
        GET          /flavors/detail

    Example:
        >>> service = NovaService()
        >>> double = NovaServiceHTTP(service)
        >>> http = HTTPClient(config, adapters={double.base_url: double.requests_adapter()})
    """

    def __init__(self, service: NovaService, base_url: str = DEFAULT_BASE_URL):
        self.service = service
        self.base_url = base_url.rstrip('/')
        self._base_path = urlsplit(self.base_url).path.rstrip('/')
        self.request_count = 0
        self._count_lock = threading.Lock()
        self._routes: List[Tuple[str, re.Pattern, Callable[..., WireResponse]]] = [
            ("GET", re.compile(r"^/os-security-groups$"), self._list_security_groups),
            ("POST", re.compile(r"^/os-security-groups$"), self._create_security_group),
            ("GET", re.compile(r"^/os-security-groups/(?P<item_id>[^/]+)$"), self._get_security_group),
            ("DELETE", re.compile(r"^/os-security-groups/(?P<item_id>[^/]+)$"), self._delete_security_group),
            ("GET", re.compile(r"^/os-floating-ips$"), self._list_floating_ips),
            ("POST", re.compile(r"^/os-floating-ips$"), self._allocate_floating_ip),
            ("GET", re.compile(r"^/os-floating-ips/(?P<item_id>[^/]+)$"), self._get_floating_ip),
            ("DELETE", re.compile(r"^/os-floating-ips/(?P<item_id>[^/]+)$"), self._delete_floating_ip),
            ("GET", re.compile(r"^/flavors/detail$"), self._list_flavors),
        ]

    # ==================== Диспетчеризация ====================

    def handle(self, method: str, url: str, body: Optional[bytes] = None) -> WireResponse:
        """
        Обработать один запрос.

        ServerError любой операции (в т.ч. из control point) сериализуется
        в статус, fault body и Retry-After.
        """
        with self._count_lock:
            self.request_count += 1
        path = urlsplit(url).path
        if not path.startswith(self._base_path):
            return _fault_response(ServerError(404, "itemNotFound", f"Unknown endpoint {path}"))
        path = path[len(self._base_path):].rstrip('/') or '/'

        for route_method, pattern, handler in self._routes:
            match = pattern.match(path)
            if match and route_method == method.upper():
                try:
                    return handler(body, **match.groupdict())
                except ServerError as e:
                    logger.debug(f"{method} {path} -> {e.status} {e.code}")
                    return _fault_response(e)

        return _fault_response(ServerError(404, "itemNotFound", f"Unknown endpoint {method} {path}"))

    @staticmethod
    def _load(body: Optional[bytes]) -> Dict[str, Any]:
        if not body:
            return {}
        try:
            data = json.loads(body)
        except ValueError as e:
            raise bad_request(f"Malformed request body: {e}") from e
        if not isinstance(data, dict):
            raise bad_request("Request body must be a JSON object.")
        return data

    # ==================== Security groups ====================

    def _list_security_groups(self, body: Optional[bytes]) -> WireResponse:
        return _json_response(200, {"security_groups": self.service.all_security_groups()})

    def _create_security_group(self, body: Optional[bytes]) -> WireResponse:
        group = self._load(body).get("security_group")
        if not isinstance(group, dict):
            raise bad_request("Missing security_group in request body.")
        created = self.service.add_security_group(group.get("name", ""), group.get("description", ""))
        return _json_response(200, {"security_group": created})

    def _get_security_group(self, body: Optional[bytes], item_id: str) -> WireResponse:
        return _json_response(200, {"security_group": self.service.security_group(item_id)})

    def _delete_security_group(self, body: Optional[bytes], item_id: str) -> WireResponse:
        self.service.remove_security_group(item_id)
        return _json_response(202)

    # ==================== Floating IPs ====================

    def _list_floating_ips(self, body: Optional[bytes]) -> WireResponse:
        return _json_response(200, {"floating_ips": self.service.all_floating_ips()})

    def _allocate_floating_ip(self, body: Optional[bytes]) -> WireResponse:
        fip = self.service.add_floating_ip(self._load(body).get("pool"))
        return _json_response(200, {"floating_ip": fip})

    def _get_floating_ip(self, body: Optional[bytes], item_id: str) -> WireResponse:
        return _json_response(200, {"floating_ip": self.service.floating_ip(item_id)})

    def _delete_floating_ip(self, body: Optional[bytes], item_id: str) -> WireResponse:
        self.service.remove_floating_ip(item_id)
        return _json_response(202)

    # ==================== Flavors ====================

    def _list_flavors(self, body: Optional[bytes]) -> WireResponse:
        return _json_response(200, {"flavors": self.service.all_flavors()})

    # ==================== Транспорты ====================

    def requests_adapter(self) -> "NovaServiceAdapter":
        """Transport adapter для монтирования в requests.Session."""
        return NovaServiceAdapter(self)

    def httpx_transport(self) -> httpx.MockTransport:
        """Transport для httpx.Client / httpx.AsyncClient."""

        def handler(request: httpx.Request) -> httpx.Response:
            status, headers, content = self.handle(request.method, str(request.url), request.content)
            return httpx.Response(status, headers=headers, content=content)

        return httpx.MockTransport(handler)


class NovaServiceAdapter(BaseAdapter):
    """requests adapter, отдающий запросы в NovaServiceHTTP без сети."""

    def __init__(self, double: NovaServiceHTTP):
        super().__init__()
        self.double = double

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        body = request.body
        if isinstance(body, str):
            body = body.encode("utf-8")

        status, headers, content = self.double.handle(request.method, request.url, body)

        response = requests.Response()
        response.status_code = status
        response.headers = CaseInsensitiveDict(headers)
        response._content = content
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        response.reason = _reason_phrase(status)
        return response

    def close(self):
        pass
