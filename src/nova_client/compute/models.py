"""
Модели ресурсов compute API.

Провайдер может отдавать id как числа или как строки; на стороне
клиента id всегда str.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


def normalize_id(value: Any) -> Optional[str]:
    """
    Привести id провайдера к строке.

    Examples:
        >>> normalize_id(42)
        '42'
        >>> normalize_id("6f1c...")
        '6f1c...'
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid resource id: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


@dataclass(frozen=True)
class SecurityGroup:
    """Security group."""
    id: str
    name: str
    description: str = ""
    tenant_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SecurityGroup":
        return cls(
            id=normalize_id(data["id"]),
            name=data.get("name", ""),
            description=data.get("description") or "",
            tenant_id=normalize_id(data.get("tenant_id")),
        )


@dataclass(frozen=True)
class FloatingIP:
    """Floating IP (адрес может быть привязан к инстансу)."""
    id: str
    ip: str
    pool: Optional[str] = None
    fixed_ip: Optional[str] = None
    instance_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FloatingIP":
        return cls(
            id=normalize_id(data["id"]),
            ip=data.get("ip") or "",
            pool=data.get("pool"),
            fixed_ip=data.get("fixed_ip"),
            instance_id=normalize_id(data.get("instance_id")),
        )


@dataclass(frozen=True)
class Flavor:
    """Flavor (размер инстанса)."""
    id: str
    name: str
    ram: int = 0
    vcpus: int = 0
    disk: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Flavor":
        return cls(
            id=normalize_id(data["id"]),
            name=data.get("name", ""),
            ram=int(data.get("ram") or 0),
            vcpus=int(data.get("vcpus") or 0),
            disk=int(data.get("disk") or 0),
        )
