"""Abstract base class for DNS providers."""

from abc import ABC, abstractmethod

from dreamdns.models import ProviderRecord


class DNSProvider(ABC):
    """The three record operations the reconciler's executor relies on."""

    @abstractmethod
    def list_records(self) -> list[ProviderRecord]:
        """List every DNS record on the account.

        Raises:
            ProviderQueryFailed: If the listing could not be fetched or parsed
        """
        pass

    @abstractmethod
    def add_record(
        self, hostname: str, record_type: str, value: str, comment: str | None = None
    ) -> None:
        """Create a DNS record.

        Args:
            hostname: The record name (e.g., "home.example.com")
            record_type: The record type (e.g., "A")
            value: The record target (e.g., "203.0.113.5")
            comment: Optional comment shown in the provider's panel

        Raises:
            ProviderError: If the provider rejected the call
        """
        pass

    @abstractmethod
    def remove_record(self, hostname: str, record_type: str, value: str) -> None:
        """Remove the record exactly matching hostname, type and value.

        Raises:
            ProviderError: If the provider rejected the call
        """
        pass

    def close(self) -> None:
        """Release any resources held by the provider."""
        pass
