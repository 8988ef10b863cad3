"""
In-memory симулятор compute сервиса.

Каждая операция - control point с тем же именем, что и метод.
"""

import copy
import ipaddress
import itertools
import threading
import uuid
from typing import Any, Dict, List, Optional

from .control import ServiceControl
from .errors import bad_request, no_more_floating_ips, not_found

DEFAULT_TENANT_ID = "tenant"
DEFAULT_POOL = "public"

DEFAULT_FLAVORS = (
    {"name": "m1.tiny", "ram": 512, "vcpus": 1, "disk": 1},
    {"name": "m1.small", "ram": 2048, "vcpus": 1, "disk": 20},
    {"name": "m1.medium", "ram": 4096, "vcpus": 2, "disk": 40},
)


class NovaService(ServiceControl):
    """
    Симулятор compute сервиса: security groups, floating IPs, flavors.

    Все коллекции защищены одним RLock; хуки вызываются под ним же,
    поэтому порядок вызовов детерминирован.

    Args:
        use_numeric_ids: Выдавать id 1, 2, ... вместо uuid4 hex
        tenant_id: Tenant создаваемых ресурсов
        ip_network: Сеть, из которой выдаются floating IP

    Examples:
        >>> service = NovaService(use_numeric_ids=True)
        >>> group = service.add_security_group("web", "web tier")
        >>> isinstance(group["id"], int)
        True
    """

    def __init__(
        self,
        use_numeric_ids: bool = False,
        tenant_id: str = DEFAULT_TENANT_ID,
        ip_network: str = "203.0.113.0/24",
    ):
        super().__init__()
        self.use_numeric_ids = use_numeric_ids
        self.tenant_id = tenant_id
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._addresses = ipaddress.ip_network(ip_network).hosts()

        self._security_groups: Dict[str, Dict[str, Any]] = {}
        self._floating_ips: Dict[str, Dict[str, Any]] = {}
        self._flavors: Dict[str, Dict[str, Any]] = {}

        self._create_security_group("default", "default")
        for flavor in DEFAULT_FLAVORS:
            flavor_id = self._next_id()
            self._flavors[str(flavor_id)] = dict(flavor, id=flavor_id)

    def _next_id(self) -> Any:
        if self.use_numeric_ids:
            return next(self._ids)
        return uuid.uuid4().hex

    # ==================== Security groups ====================

    def _create_security_group(self, name: str, description: str) -> Dict[str, Any]:
        group_id = self._next_id()
        group = {
            "id": group_id,
            "name": name,
            "description": description,
            "tenant_id": self.tenant_id,
            "rules": [],
        }
        self._security_groups[str(group_id)] = group
        return group

    def add_security_group(self, name: str, description: str = "") -> Dict[str, Any]:
        """
        Создать security group.

        Raises:
            ServerError: 400, если группа с таким именем уже есть
        """
        with self._lock:
            self.process_control_point("add_security_group", name, description)
            if not name:
                raise bad_request("Security group name is required.")
            if any(g["name"] == name for g in self._security_groups.values()):
                raise bad_request(f"Security group {name} already exists.")
            return copy.deepcopy(self._create_security_group(name, description))

    def remove_security_group(self, group_id: Any) -> None:
        with self._lock:
            self.process_control_point("remove_security_group", group_id)
            if self._security_groups.pop(str(group_id), None) is None:
                raise not_found("Security group", group_id)

    def security_group(self, group_id: Any) -> Dict[str, Any]:
        with self._lock:
            self.process_control_point("security_group", group_id)
            group = self._security_groups.get(str(group_id))
            if group is None:
                raise not_found("Security group", group_id)
            return copy.deepcopy(group)

    def security_group_by_name(self, name: str) -> Dict[str, Any]:
        with self._lock:
            self.process_control_point("security_group_by_name", name)
            for group in self._security_groups.values():
                if group["name"] == name:
                    return copy.deepcopy(group)
            raise not_found("Security group", name)

    def all_security_groups(self) -> List[Dict[str, Any]]:
        with self._lock:
            self.process_control_point("all_security_groups")
            return copy.deepcopy(list(self._security_groups.values()))

    # ==================== Floating IPs ====================

    def add_floating_ip(self, pool: Optional[str] = None) -> Dict[str, Any]:
        """
        Выделить floating IP из сети симулятора.

        Raises:
            ServerError: no_more_floating_ips(), если сеть исчерпана
        """
        with self._lock:
            self.process_control_point("add_floating_ip", pool)
            address = next(self._addresses, None)
            if address is None:
                raise no_more_floating_ips()
            ip_id = self._next_id()
            fip = {
                "id": ip_id,
                "ip": str(address),
                "pool": pool or DEFAULT_POOL,
                "fixed_ip": None,
                "instance_id": None,
            }
            self._floating_ips[str(ip_id)] = fip
            return dict(fip)

    def remove_floating_ip(self, ip_id: Any) -> None:
        with self._lock:
            self.process_control_point("remove_floating_ip", ip_id)
            if self._floating_ips.pop(str(ip_id), None) is None:
                raise not_found("Floating ip", ip_id)

    def floating_ip(self, ip_id: Any) -> Dict[str, Any]:
        with self._lock:
            self.process_control_point("floating_ip", ip_id)
            fip = self._floating_ips.get(str(ip_id))
            if fip is None:
                raise not_found("Floating ip", ip_id)
            return dict(fip)

    def all_floating_ips(self) -> List[Dict[str, Any]]:
        with self._lock:
            self.process_control_point("all_floating_ips")
            return [dict(fip) for fip in self._floating_ips.values()]

    # ==================== Flavors ====================

    def all_flavors(self) -> List[Dict[str, Any]]:
        with self._lock:
            self.process_control_point("all_flavors")
            return [dict(flavor) for flavor in self._flavors.values()]
