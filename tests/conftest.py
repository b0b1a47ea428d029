"""Shared test fixtures for dreamdns tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml
from typer.testing import CliRunner

from dreamdns.models import DesiredEntry, ProviderRecord, RecordType

IP = "203.0.113.5"
OLD_IP = "203.0.113.9"


# ============================================================================
# CLI Fixtures
# ============================================================================


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


# ============================================================================
# Project Directory Fixtures
# ============================================================================


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """Create a temporary project directory with .env, domains.csv and dreamdns.yaml."""
    monkeypatch.delenv("DREAMHOST_API_KEY", raising=False)

    (tmp_path / ".env").write_text("DREAMHOST_API_KEY=test-key\n")
    (tmp_path / "domains.csv").write_text("A,example.com\nA,www.example.com\n")

    config_data = {
        "call_delay": 0,
        "ip_services": ["https://ip.test"],
    }
    with open(tmp_path / "dreamdns.yaml", "w") as f:
        yaml.dump(config_data, f)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ============================================================================
# Sample Data Fixtures
# ============================================================================


def make_record(hostname: str, value: str, record_type: str = "A") -> ProviderRecord:
    """Build a provider record on the example.com zone."""
    return ProviderRecord(
        account_id="1234",
        zone="example.com",
        hostname=hostname,
        type=record_type,
        value=value,
    )


def apply_plan(records: list[ProviderRecord], plan) -> list[ProviderRecord]:
    """Return the record set the provider would hold after executing plan."""
    result = list(records)
    for action in plan.actions:
        for stale_ip in action.stale:
            result = [
                r
                for r in result
                if not (
                    r.hostname == action.hostname
                    and r.type == action.type.value
                    and r.value == stale_ip
                )
            ]
        if action.create_value is not None:
            result.append(make_record(action.hostname, action.create_value, action.type.value))
    return result


@pytest.fixture
def entry() -> DesiredEntry:
    """Provide the desired entry A example.com."""
    return DesiredEntry(type=RecordType.A, hostname="example.com")


@pytest.fixture
def sample_records() -> list[ProviderRecord]:
    """Provide a snapshot where example.com is stale and www.example.com is correct."""
    return [
        make_record("example.com", OLD_IP),
        make_record("www.example.com", IP),
        make_record("example.com", "mx.example.com", record_type="MX"),
    ]


@pytest.fixture
def mock_provider(sample_records) -> MagicMock:
    """Provide a mock DNS provider returning sample_records."""
    provider = MagicMock()
    provider.list_records.return_value = sample_records
    return provider


SAMPLE_LISTING = (
    "success\n"
    "account_id\tzone\trecord\ttype\tvalue\tcomment\teditable\n"
    "1234\texample.com\texample.com\tA\t203.0.113.9\t\t1\n"
    "1234\texample.com\twww.example.com\tA\t203.0.113.5\thome\t1\n"
    "1234\texample.com\texample.com\tMX\t0 mx1.example.com\t\t0\n"
)


@pytest.fixture
def sample_listing() -> str:
    """Provide a raw dns-list_records response body."""
    return SAMPLE_LISTING
