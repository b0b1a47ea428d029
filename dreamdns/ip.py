"""External IP detection via public IP-echo services."""

import ipaddress
import logging
import re
from collections.abc import Sequence

import httpx
from rich.console import Console

from dreamdns.errors import NoIpAvailable

logger = logging.getLogger(__name__)
console = Console(stderr=True)

IPV4_PATTERN = re.compile(r"\b(?:[0-9]{1,3}\.){3}[0-9]{1,3}\b")


def extract_ipv4(text: str) -> str | None:
    """Return the first valid dotted-quad IPv4 address found in text."""
    for match in IPV4_PATTERN.finditer(text):
        candidate = match.group(0)
        try:
            ipaddress.IPv4Address(candidate)
        except ValueError:
            continue
        return candidate
    return None


def resolve_external_ip(
    services: Sequence[str],
    connect_timeout: float = 5.0,
    timeout: float = 10.0,
) -> str:
    """Get the external IP address of this machine.

    Services are tried in order, once each; the first one that answers with
    an address wins.

    Raises:
        NoIpAvailable: If every service failed
    """
    request_timeout = httpx.Timeout(timeout, connect=connect_timeout)

    for service in services:
        console.print(f"Trying {service}...")
        try:
            response = httpx.get(service, timeout=request_timeout)
        except httpx.HTTPError as e:
            logger.debug("IP service %s failed: %s", service, e)
            console.print(f"[red]✗[/red] Failed to get IP from {service}")
            continue

        ip = None
        if 200 <= response.status_code < 300:
            ip = extract_ipv4(response.text)
        else:
            logger.debug("IP service %s returned HTTP %s", service, response.status_code)

        if ip:
            console.print(f"[green]✓[/green] Got IP from {service}: {ip}")
            return ip

        console.print(f"[red]✗[/red] Failed to get IP from {service}")

    raise NoIpAvailable("Failed to get external IP from all services")
