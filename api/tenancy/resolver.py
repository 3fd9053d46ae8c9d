"""
Map a request hostname to a tenant key.

Subdomains are the hostname labels read right-to-left, after dropping the
base domain (`offset` labels, 2 for `example.com`). For
`t.d.c.b.a.example.com` that list is `["a", "b", "c", "d", "t"]`, so the
tenant label at index 4 is `t`. Anything shorter resolves to the default.
"""

from __future__ import annotations

import ipaddress

DEFAULT_TENANT = "default"
TENANT_SUBDOMAIN_INDEX = 4


def _is_ip(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname.strip("[]"))
    except ValueError:
        return False
    return True


def subdomains(hostname: str | None, offset: int = 2) -> list[str]:
    hostname = (hostname or "").strip()
    if not hostname or _is_ip(hostname):
        return []
    labels = hostname.split(".")
    labels.reverse()
    return labels[offset:]


def resolve_tenant(hostname: str | None, offset: int = 2) -> str:
    labels = subdomains(hostname, offset)
    if len(labels) > TENANT_SUBDOMAIN_INDEX and labels[TENANT_SUBDOMAIN_INDEX]:
        return labels[TENANT_SUBDOMAIN_INDEX]
    return DEFAULT_TENANT
