"""Ресурсные операции compute API."""

from .client import FLAVOR, FLOATING_IP, SECURITY_GROUP, ComputeClient
from .models import Flavor, FloatingIP, SecurityGroup, normalize_id

__all__ = [
    "ComputeClient",
    "SecurityGroup",
    "FloatingIP",
    "Flavor",
    "normalize_id",
    "SECURITY_GROUP",
    "FLOATING_IP",
    "FLAVOR",
]
