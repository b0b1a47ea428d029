"""Exceptions raised by dreamdns."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dreamdns.models import ReconcileAction


class DreamDNSError(Exception):
    """Base class for all dreamdns errors."""


class ConfigMissing(DreamDNSError):
    """The secrets file could not be found."""

    def __init__(self, path):
        self.path = path
        super().__init__(f".env file not found at {path}")


class SecretMissing(DreamDNSError):
    """The API key is unset or empty."""

    def __init__(self, name: str = "DREAMHOST_API_KEY"):
        self.name = name
        super().__init__(f"{name} not set or empty")


class ConfigInvalid(DreamDNSError):
    """dreamdns.yaml could not be parsed or failed validation."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration in {path}: {reason}")


class DesiredListMissing(DreamDNSError):
    """The desired-entry list file does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"domains file not found at {path}")


class DesiredListInvalid(DreamDNSError):
    """A row of the desired-entry list could not be parsed."""

    def __init__(self, line: int, content: str):
        self.line = line
        self.content = content
        super().__init__(f"Malformed entry on line {line}: {content!r} (expected TYPE,HOSTNAME)")


class UnsupportedRecordType(DreamDNSError):
    """A desired entry names a record type this tool does not manage."""

    def __init__(self, record_type: str, hostname: str):
        self.record_type = record_type
        self.hostname = hostname
        super().__init__(
            f"Unsupported record type {record_type} found for entry: {hostname}"
        )


class NoIpAvailable(DreamDNSError):
    """None of the IP-echo services returned an address."""


class ProviderQueryFailed(DreamDNSError):
    """Listing the provider's DNS records failed."""


class ProviderError(DreamDNSError):
    """A single provider call returned an error."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(code)


class ActionFailed(DreamDNSError):
    """A provider call failed while applying a reconcile action."""

    def __init__(self, action: ReconcileAction, error: ProviderError):
        self.action = action
        self.error = error
        super().__init__(f"{action.describe()}: {error.code}")
