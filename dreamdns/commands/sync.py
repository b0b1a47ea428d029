"""The sync command: reconcile DNS records with the current external IP."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dreamdns import __version__
from dreamdns.config import (
    DreamDNSConfig,
    get_project_root,
    load_config,
    load_env_settings,
    require_api_key,
    resolve_path,
)
from dreamdns.desired import load_desired_entries
from dreamdns.errors import (
    ConfigInvalid,
    ConfigMissing,
    DesiredListInvalid,
    DesiredListMissing,
    DreamDNSError,
    NoIpAvailable,
    ProviderQueryFailed,
    SecretMissing,
    UnsupportedRecordType,
)
from dreamdns.executor import execute_plan
from dreamdns.ip import resolve_external_ip
from dreamdns.providers import DNSProvider, DreamHostProvider
from dreamdns.reconcile import dedupe_entries, reconcile
from dreamdns.snapshot import take_snapshot, verify

console = Console()

HINTS: dict[type[DreamDNSError], list[str]] = {
    ConfigInvalid: [
        "Fix or remove dreamdns.yaml; every setting is optional",
        "Example: call_delay: 1.0",
    ],
    ConfigMissing: [
        "Create a .env file with:",
        "  DREAMHOST_API_KEY=your_api_key_here",
    ],
    SecretMissing: [
        "Add the following line to your .env file:",
        "  DREAMHOST_API_KEY=your_api_key_here",
    ],
    DesiredListMissing: [
        "Create a domains.csv file with format: TYPE,DOMAIN",
        "Example: A,example.com",
    ],
    DesiredListInvalid: ["Each line must be TYPE,DOMAIN (e.g., A,example.com)"],
    UnsupportedRecordType: ["Supported types: A, AAAA, CNAME, NS, NAPTR, SRV, TXT"],
    NoIpAvailable: ["Check network connectivity or configure other ip_services"],
    ProviderQueryFailed: ["Check the API key has dns-* permissions"],
}


def fail(error: DreamDNSError) -> typer.Exit:
    """Print a pre-flight error with its fix-it hint and return an exit to raise."""
    console.print(f"[red]✗[/red] {escape(str(error))}")
    for line in HINTS.get(type(error), []):
        console.print(f"  {line}")
    console.print("  Use --help for more information.")
    return typer.Exit(1)


def configure_logging(verbose: bool) -> None:
    """Route library log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def get_dns_provider(api_key: str, config: DreamDNSConfig) -> DNSProvider:
    """Get the DreamHost provider for this run."""
    return DreamHostProvider(
        api_key=api_key,
        base_url=config.api_url,
        timeout=config.request_timeout,
    )


def version_callback(value: bool) -> None:
    if value:
        console.print(f"dreamdns v{__version__}")
        raise typer.Exit()


def run(
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Show what changes would be made without executing them"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Run without prompts (suitable for cron jobs)"
    ),
    env_file: Path | None = typer.Option(
        None, "--env-file", help="File containing DREAMHOST_API_KEY (default: .env)"
    ),
    domains: Path | None = typer.Option(
        None, "--domains", help="Desired entries, one TYPE,DOMAIN per line (default: domains.csv)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool | None = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show the version"
    ),
) -> None:
    """Update DNS records listed in domains.csv with your current external IP.

    Only changes what differs, to stay within DreamHost's hourly API limits:
    CREATE adds a missing record, UPDATE replaces old IPs, CLEANUP removes
    duplicates with wrong IPs, SKIP leaves correct records alone.
    """
    configure_logging(verbose)

    if dry_run:
        console.print("[bold]=== DRY RUN MODE - NO CHANGES WILL BE MADE ===[/bold]")

    try:
        config = load_config()
        root = get_project_root()
        api_key = require_api_key(load_env_settings(env_file))
        entries = load_desired_entries(domains or resolve_path(config.domains_file, root))
    except DreamDNSError as e:
        raise fail(e)

    console.print(f"Number of entries: {len(entries)}")
    entries, dropped = dedupe_entries(entries)
    for entry in dropped:
        console.print(
            f"[yellow]![/yellow] Duplicate entry {entry.type} {entry.hostname} ignored"
        )

    try:
        ip = resolve_external_ip(
            config.ip_services,
            connect_timeout=config.ip_connect_timeout,
            timeout=config.ip_timeout,
        )
    except NoIpAvailable as e:
        raise fail(e)
    console.print(f"Current External IP: {ip}")

    provider = get_dns_provider(api_key, config)
    try:
        try:
            records = take_snapshot(provider, resolve_path(config.snapshot_file, root))
        except ProviderQueryFailed as e:
            raise fail(e)
        console.print(f"Total Number of DNS records: {len(records)}")
        console.print()

        console.print("[bold]=== ANALYZING CHANGES NEEDED ===[/bold]")
        plan = reconcile(entries, records, ip)
        for action in plan.actions:
            console.print(escape(action.describe()))

        console.print()
        console.print(f"[bold]SUMMARY:[/bold] {plan.total_calls} API calls needed")
        if not plan.has_changes:
            console.print("[green]✓[/green] No changes needed - all DNS records are already correct!")
            return

        if dry_run:
            console.print(
                f"DRY RUN: Would make {plan.total_calls} API calls. "
                "Run without --dry-run to execute."
            )
            return

        if quiet:
            console.print(
                f"QUIET MODE: Proceeding with {plan.total_calls} API calls without confirmation."
            )
        elif not typer.confirm("Proceed with these changes?", default=False):
            console.print("Cancelled.")
            raise typer.Exit(1)

        console.print()
        console.print("[bold]=== EXECUTING CHANGES ===[/bold]")
        report = execute_plan(plan, provider, delay=config.call_delay)

        console.print("Refreshing DNS records for verification...")
        final_path = resolve_path(config.final_snapshot_file, root)
        try:
            verify(provider, final_path)
        except ProviderQueryFailed as e:
            raise fail(e)
        console.print(f"[green]✓[/green] Updated DNS records saved to {final_path}")
    finally:
        provider.close()

    if not report.ok:
        console.print(
            f"[red]✗[/red] {len(report.failures)} action(s) failed after "
            f"{report.calls_made} API calls. Re-run to retry."
        )
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Done: {report.calls_made} API calls made")
