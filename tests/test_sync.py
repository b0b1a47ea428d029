"""Tests for the sync command."""

from pathlib import Path
from unittest.mock import MagicMock, call, patch

from conftest import IP, make_record
from typer.testing import CliRunner

from dreamdns.cli import app
from dreamdns.commands.sync import get_dns_provider
from dreamdns.config import DreamDNSConfig
from dreamdns.errors import NoIpAvailable, ProviderError, ProviderQueryFailed
from dreamdns.providers import DreamHostProvider


def invoke(runner: CliRunner, provider, args=None, ip=IP, input=None):
    """Run the CLI with the provider and IP resolver patched out."""
    with patch("dreamdns.commands.sync.get_dns_provider", return_value=provider) as get_provider:
        with patch("dreamdns.commands.sync.resolve_external_ip", return_value=ip) as resolve:
            result = runner.invoke(app, args or [], input=input)
    return result, get_provider, resolve


def test_version(runner: CliRunner):
    """Test --version prints the version."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "dreamdns v" in result.stdout


def test_help(runner: CliRunner):
    """Test -h shows usage."""
    result = runner.invoke(app, ["-h"])
    assert result.exit_code == 0
    assert "--dry-run" in result.stdout


def test_get_dns_provider():
    """Test the provider is built from the API key and config."""
    with patch("dreamdns.providers.dreamhost.httpx.Client"):
        provider = get_dns_provider("test-key", DreamDNSConfig())
    assert isinstance(provider, DreamHostProvider)
    assert provider.api_key == "test-key"


class TestPreflight:
    """Tests for failures before any mutating call."""

    def test_missing_env_file(self, project_dir: Path, runner: CliRunner):
        """Test a missing .env aborts with exit 1."""
        (project_dir / ".env").unlink()
        provider = MagicMock()

        result, get_provider, resolve = invoke(runner, provider)

        assert result.exit_code == 1
        assert "DREAMHOST_API_KEY=your_api_key_here" in result.stdout
        resolve.assert_not_called()
        get_provider.assert_not_called()

    def test_empty_api_key(self, project_dir: Path, runner: CliRunner):
        """Test an empty key aborts with exit 1."""
        (project_dir / ".env").write_text("DREAMHOST_API_KEY=\n")

        result, get_provider, _ = invoke(runner, MagicMock())

        assert result.exit_code == 1
        assert "not set or empty" in result.stdout
        get_provider.assert_not_called()

    def test_invalid_config_file(self, project_dir: Path, runner: CliRunner):
        """Test a bad dreamdns.yaml aborts with exit 1 before any network call."""
        (project_dir / "dreamdns.yaml").write_text("call_delay: -5\n")

        result, get_provider, resolve = invoke(runner, MagicMock(), ["--dry-run"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout
        assert "Fix or remove dreamdns.yaml" in result.stdout
        resolve.assert_not_called()
        get_provider.assert_not_called()

    def test_missing_domains_file(self, project_dir: Path, runner: CliRunner):
        (project_dir / "domains.csv").unlink()

        result, _, resolve = invoke(runner, MagicMock())

        assert result.exit_code == 1
        assert "TYPE,DOMAIN" in result.stdout
        resolve.assert_not_called()

    def test_invalid_type_aborts_before_network(self, project_dir: Path, runner: CliRunner):
        """Test an unsupported type anywhere aborts before IP resolution or listing."""
        (project_dir / "domains.csv").write_text("A,example.com\nMXX,foo\n")

        result, get_provider, resolve = invoke(runner, MagicMock())

        assert result.exit_code == 1
        assert "Unsupported record type MXX" in result.stdout
        resolve.assert_not_called()
        get_provider.assert_not_called()

    def test_no_ip_available(self, project_dir: Path, runner: CliRunner):
        provider = MagicMock()
        with patch("dreamdns.commands.sync.get_dns_provider", return_value=provider):
            with patch(
                "dreamdns.commands.sync.resolve_external_ip",
                side_effect=NoIpAvailable("Failed to get external IP from all services"),
            ):
                result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "Failed to get external IP" in result.stdout
        provider.list_records.assert_not_called()

    def test_snapshot_failure(self, project_dir: Path, runner: CliRunner):
        """Test a failed record listing aborts with exit 1."""
        provider = MagicMock()
        provider.list_records.side_effect = ProviderQueryFailed("DNS query failed: empty response")

        result, _, _ = invoke(runner, provider, ["--quiet"])

        assert result.exit_code == 1
        assert "DNS query failed" in result.stdout
        provider.add_record.assert_not_called()
        provider.remove_record.assert_not_called()
        provider.close.assert_called_once()


class TestRun:
    """Tests for planning and execution."""

    def test_no_changes_needed(self, project_dir: Path, runner: CliRunner):
        """Test exit 0 and no mutations when every record is correct."""
        provider = MagicMock()
        provider.list_records.return_value = [
            make_record("example.com", IP),
            make_record("www.example.com", IP),
        ]

        result, _, _ = invoke(runner, provider)

        assert result.exit_code == 0
        assert "No changes needed" in result.stdout
        provider.add_record.assert_not_called()
        provider.remove_record.assert_not_called()

    def test_dry_run_never_mutates(self, project_dir: Path, runner: CliRunner, mock_provider):
        """Test --dry-run prints the plan and makes only the read call."""
        result, _, resolve = invoke(runner, mock_provider, ["--dry-run"])

        assert result.exit_code == 0
        assert "UPDATE: A example.com" in result.stdout
        assert "SKIP: A www.example.com" in result.stdout
        assert "2 API calls needed" in result.stdout
        assert "DRY RUN" in result.stdout
        resolve.assert_called_once()
        mock_provider.list_records.assert_called_once()
        mock_provider.add_record.assert_not_called()
        mock_provider.remove_record.assert_not_called()
        assert (project_dir / "dns.yaml").exists()
        assert not (project_dir / "dns_final.yaml").exists()

    def test_quiet_executes_and_verifies(self, project_dir: Path, runner: CliRunner, mock_provider):
        """Test --quiet applies the plan without prompting and saves the final snapshot."""
        result, _, _ = invoke(runner, mock_provider, ["-q"])

        assert result.exit_code == 0
        mock_provider.remove_record.assert_called_once_with("example.com", "A", "203.0.113.9")
        mock_provider.add_record.assert_called_once_with("example.com", "A", IP)
        assert mock_provider.list_records.call_count == 2
        assert (project_dir / "dns_final.yaml").exists()
        mock_provider.close.assert_called_once()

    def test_confirmation_accepted(self, project_dir: Path, runner: CliRunner, mock_provider):
        result, _, _ = invoke(runner, mock_provider, input="y\n")

        assert result.exit_code == 0
        mock_provider.add_record.assert_called_once()

    def test_confirmation_declined(self, project_dir: Path, runner: CliRunner, mock_provider):
        """Test declining the prompt cancels with exit 1 and no mutations."""
        result, _, _ = invoke(runner, mock_provider, input="n\n")

        assert result.exit_code == 1
        assert "Cancelled." in result.stdout
        mock_provider.add_record.assert_not_called()
        mock_provider.remove_record.assert_not_called()

    def test_duplicate_entries_deduplicated(self, project_dir: Path, runner: CliRunner):
        """Test a repeated entry is warned about and planned once."""
        (project_dir / "domains.csv").write_text("A,example.com\nA,example.com\n")
        provider = MagicMock()
        provider.list_records.return_value = []

        result, _, _ = invoke(runner, provider, ["--quiet"])

        assert result.exit_code == 0
        assert "Duplicate entry" in result.stdout
        provider.add_record.assert_called_once_with("example.com", "A", IP)

    def test_failed_action_exits_nonzero(self, project_dir: Path, runner: CliRunner, mock_provider):
        """Test execution continues past a failure, verifies, then exits 1."""
        (project_dir / "domains.csv").write_text("A,example.com\nA,new.example.com\n")
        mock_provider.remove_record.side_effect = ProviderError("no_such_record")

        result, _, _ = invoke(runner, mock_provider, ["--quiet"])

        assert result.exit_code == 1
        assert "no_such_record" in result.stdout
        assert mock_provider.add_record.call_args_list == [
            call("example.com", "A", IP),
            call("new.example.com", "A", IP),
        ]
        assert mock_provider.list_records.call_count == 2

    def test_domains_option(self, project_dir: Path, runner: CliRunner):
        """Test --domains points at another list."""
        other = project_dir / "other.csv"
        other.write_text("AAAA,v6.example.com\n")
        provider = MagicMock()
        provider.list_records.return_value = []

        result, _, _ = invoke(runner, provider, ["--dry-run", "--domains", str(other)])

        assert result.exit_code == 0
        assert "CREATE: AAAA v6.example.com" in result.stdout
