"""Discogs OAuth CLI - command-line login for the Discogs API."""

from discogs_oauth.cli.app import app

# Import command modules to register them with the app
from discogs_oauth.cli.commands import auth

# Register sub-apps
app.add_typer(auth.app, name="auth", help="Authentication commands.")


def main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "main"]
