"""
Simulated Service Walkthrough

Runs the compute client against the in-process simulated service and
injects provider faults through control points. No network needed.
"""

from nova_client import (
    ClientConfig,
    ComputeClient,
    HTTPClient,
    LoggingConfig,
    MaxAttemptsExceededError,
    NotFoundError,
    QuotaExceededError,
    ResourceExhaustedError,
)
from nova_client.testservices import (
    NovaService,
    NovaServiceHTTP,
    control_point,
    fail_always,
    fail_times,
    ip_limit_exceeded,
    no_more_floating_ips,
    rate_limit_exceeded,
)


def build_client(double: NovaServiceHTTP) -> HTTPClient:
    config = ClientConfig.create(
        base_url=double.base_url,
        auth_token="demo-token",
        logging=LoggingConfig.create(level="INFO", format="text"),
    )
    return HTTPClient(config, adapters={double.base_url: double.requests_adapter()})


def find_or_create_group(compute: ComputeClient):
    print("\n=== Find or create security group ===")
    try:
        group = compute.security_group_by_name("web")
        print(f"Found: {group}")
    except NotFoundError as e:
        print(f"{e}, creating...")
        group = compute.create_security_group("web", "web tier")
        print(f"Created: {group}")
    return group


def delete_under_rate_limit(compute: ComputeClient, service: NovaService, group):
    print("\n=== Delete with transient rate limiting ===")
    hook = fail_times(2, rate_limit_exceeded)
    with control_point(service, "remove_security_group", hook):
        compute.delete_security_group(group.id)
    print(f"Deleted after {hook.calls} attempts")

    print("\n=== Delete with permanent rate limiting ===")
    group = compute.create_security_group("db")
    with control_point(service, "remove_security_group", fail_always(rate_limit_exceeded)):
        try:
            compute.delete_security_group(group.id)
        except MaxAttemptsExceededError as e:
            print(f"Gave up: {e.message}")


def floating_ips(compute: ComputeClient, service: NovaService):
    print("\n=== Floating IPs ===")
    print(f"Allocated so far: {compute.list_floating_ips()}")

    for fault, expected in ((no_more_floating_ips, ResourceExhaustedError), (ip_limit_exceeded, QuotaExceededError)):
        with control_point(service, "add_floating_ip", fail_always(fault)):
            try:
                compute.allocate_floating_ip()
            except expected as e:
                print(f"{type(e).__name__}: {e.message}")

    fip = compute.allocate_floating_ip()
    print(f"Allocated: {fip.ip} (id={fip.id})")
    compute.delete_floating_ip(fip.id)


if __name__ == "__main__":
    service = NovaService(use_numeric_ids=True)
    double = NovaServiceHTTP(service)

    with build_client(double) as http:
        compute = ComputeClient(http)
        group = find_or_create_group(compute)
        delete_under_rate_limit(compute, service, group)
        floating_ips(compute, service)
        print(f"\nFlavors: {[f.name for f in compute.list_flavors()]}")
        print(f"Requests served: {double.request_count}")
