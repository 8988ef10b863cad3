"""
Ресурсные операции compute API поверх HTTPClient.

Все запросы идут через RetryEngine транспорта; здесь только построение
запросов, разбор ответов и привязка ошибок к виду ресурса.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.exceptions import FaultError, NotFoundError
from ..core.http_client import HTTPClient
from .models import Flavor, FloatingIP, SecurityGroup, normalize_id

logger = logging.getLogger(__name__)

SECURITY_GROUP = "security group"
FLOATING_IP = "floating ip"
FLAVOR = "flavor"


def _expect(body: Any, key: str, url_hint: str) -> Any:
    """Достать ключ из тела ответа или упасть с FaultError."""
    if not isinstance(body, dict) or key not in body:
        raise FaultError(f"Unexpected response from {url_hint}: missing '{key}'")
    return body[key]


class ComputeClient:
    """
    Клиент ресурсов compute сервиса.

    Examples:
        >>> compute = ComputeClient(HTTPClient(config))
        >>> try:
        ...     group = compute.security_group_by_name("web")
        ... except NotFoundError:
        ...     group = compute.create_security_group("web", "web tier")
        >>> fip = compute.allocate_floating_ip()
    """

    def __init__(self, http: HTTPClient):
        self._http = http

    @property
    def http(self) -> HTTPClient:
        return self._http

    # ==================== Security groups ====================

    def list_security_groups(self) -> List[SecurityGroup]:
        """Все security groups (пустой список, если их нет)."""
        body = self._http.get("/os-security-groups", resource_kind=SECURITY_GROUP)
        return [SecurityGroup.from_dict(g) for g in _expect(body, "security_groups", "os-security-groups") or []]

    def get_security_group(self, group_id: Any) -> SecurityGroup:
        group_id = normalize_id(group_id)
        body = self._http.get(
            f"/os-security-groups/{group_id}",
            resource_kind=SECURITY_GROUP,
            resource_id=group_id,
        )
        return SecurityGroup.from_dict(_expect(body, "security_group", "os-security-groups"))

    def security_group_by_name(self, name: str) -> SecurityGroup:
        """
        Найти security group по имени.

        Raises:
            NotFoundError: Группы с таким именем нет
        """
        for group in self.list_security_groups():
            if group.name == name:
                return group
        raise NotFoundError(SECURITY_GROUP, name)

    def create_security_group(self, name: str, description: str = "") -> SecurityGroup:
        body = self._http.post(
            "/os-security-groups",
            json={"security_group": {"name": name, "description": description}},
            resource_kind=SECURITY_GROUP,
            resource_id=name,
        )
        group = SecurityGroup.from_dict(_expect(body, "security_group", "os-security-groups"))
        logger.debug(f"Created security group {group.name} ({group.id})")
        return group

    def delete_security_group(self, group_id: Any) -> None:
        """
        Удалить security group.

        Raises:
            NotFoundError: Группы с таким id нет
        """
        group_id = normalize_id(group_id)
        self._http.delete(
            f"/os-security-groups/{group_id}",
            resource_kind=SECURITY_GROUP,
            resource_id=group_id,
        )

    # ==================== Floating IPs ====================

    def list_floating_ips(self) -> List[FloatingIP]:
        """Все floating IP тенанта (пустой список, если их нет)."""
        body = self._http.get("/os-floating-ips", resource_kind=FLOATING_IP)
        return [FloatingIP.from_dict(f) for f in _expect(body, "floating_ips", "os-floating-ips") or []]

    def get_floating_ip(self, ip_id: Any) -> FloatingIP:
        ip_id = normalize_id(ip_id)
        body = self._http.get(
            f"/os-floating-ips/{ip_id}",
            resource_kind=FLOATING_IP,
            resource_id=ip_id,
        )
        return FloatingIP.from_dict(_expect(body, "floating_ip", "os-floating-ips"))

    def allocate_floating_ip(self, pool: Optional[str] = None) -> FloatingIP:
        """
        Выделить floating IP.

        Raises:
            ResourceExhaustedError: "Zero floating ips available"
            QuotaExceededError: "Maximum number of floating ips exceeded"
            FaultError: Провайдер вернул адрес без ip
        """
        payload: Dict[str, Any] = {"pool": pool} if pool else {}
        body = self._http.post("/os-floating-ips", json=payload, resource_kind=FLOATING_IP)
        fip = FloatingIP.from_dict(_expect(body, "floating_ip", "os-floating-ips"))
        if not fip.ip:
            raise FaultError(f"Allocated floating ip {fip.id} has no address")
        return fip

    def delete_floating_ip(self, ip_id: Any) -> None:
        ip_id = normalize_id(ip_id)
        self._http.delete(
            f"/os-floating-ips/{ip_id}",
            resource_kind=FLOATING_IP,
            resource_id=ip_id,
        )

    # ==================== Flavors ====================

    def list_flavors(self) -> List[Flavor]:
        body = self._http.get("/flavors/detail", resource_kind=FLAVOR)
        return [Flavor.from_dict(f) for f in _expect(body, "flavors", "flavors/detail") or []]
