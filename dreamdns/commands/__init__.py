"""CLI commands for dreamdns."""
