"""DNS provider implementations."""

from dreamdns.providers.base import DNSProvider
from dreamdns.providers.dreamhost import DreamHostProvider

__all__ = ["DNSProvider", "DreamHostProvider"]
