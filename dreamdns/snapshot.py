"""Before/after snapshots of the provider's records."""

from pathlib import Path

from dreamdns.config import dump_yaml
from dreamdns.models import ProviderRecord
from dreamdns.providers.base import DNSProvider


def write_snapshot(records: list[ProviderRecord], path: Path) -> None:
    """Write records to a YAML file for operator inspection."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        dump_yaml([record.model_dump() for record in records], f)


def take_snapshot(provider: DNSProvider, path: Path | None = None) -> list[ProviderRecord]:
    """Fetch the current records once, optionally saving them to path."""
    records = provider.list_records()
    if path is not None:
        write_snapshot(records, path)
    return records


def verify(provider: DNSProvider, path: Path) -> list[ProviderRecord]:
    """Re-fetch the records after execution and save them for comparison."""
    return take_snapshot(provider, path)
