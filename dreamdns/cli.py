"""CLI entry point for dreamdns."""

import typer

from dreamdns.commands import sync

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

app = typer.Typer(
    name="dreamdns",
    help="DreamHost dynamic DNS updater.",
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)

# Single command: invoked directly as `dreamdns [OPTIONS]`
app.command(name="sync", context_settings=CONTEXT_SETTINGS)(sync.run)

if __name__ == "__main__":
    app()
