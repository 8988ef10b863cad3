"""Тесты моделей compute ресурсов."""

import pytest

from nova_client.compute.models import Flavor, FloatingIP, SecurityGroup, normalize_id


@pytest.mark.parametrize("value,expected", [
    (42, "42"),
    (7.0, "7"),
    ("6f1c2e", "6f1c2e"),
    (None, None),
])
def test_normalize_id(value, expected):
    assert normalize_id(value) == expected


def test_normalize_id_rejects_bool():
    with pytest.raises(ValueError):
        normalize_id(True)


def test_security_group_from_numeric_id():
    group = SecurityGroup.from_dict({"id": 3, "name": "web", "description": None, "tenant_id": "tenant"})
    assert group == SecurityGroup(id="3", name="web", description="", tenant_id="tenant")


def test_floating_ip_from_dict():
    fip = FloatingIP.from_dict({"id": "ab12", "ip": "203.0.113.5", "pool": "public", "instance_id": None})
    assert fip.id == "ab12"
    assert fip.ip == "203.0.113.5"
    assert fip.fixed_ip is None
    assert fip.instance_id is None


def test_floating_ip_missing_ip():
    assert FloatingIP.from_dict({"id": 1, "ip": None}).ip == ""


def test_flavor_from_dict():
    flavor = Flavor.from_dict({"id": 2, "name": "m1.small", "ram": 2048, "vcpus": 1, "disk": 20})
    assert flavor == Flavor(id="2", name="m1.small", ram=2048, vcpus=1, disk=20)


def test_models_are_frozen():
    group = SecurityGroup(id="1", name="default")
    with pytest.raises(AttributeError):
        group.name = "other"
