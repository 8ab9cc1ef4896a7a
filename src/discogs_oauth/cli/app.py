"""Main Typer application."""

import logging
import os
from pathlib import Path

import typer
from rich.logging import RichHandler

from discogs_oauth.cli.config import CLIConfig
from discogs_oauth.cli.formatters import error_console

# Create main app
app = typer.Typer(
    name="discogs-auth",
    help="Discogs OAuth command-line interface.",
    no_args_is_help=True,
)


def _get_config_dir() -> Path:
    """Get XDG-compliant config directory for CLI."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "discogs-auth"
    return Path.home() / ".config" / "discogs-auth"


def _configure_logging(verbose: bool) -> None:
    """Route the library's log records to stderr through rich."""
    package_logger = logging.getLogger("discogs_oauth")
    package_logger.handlers = [RichHandler(console=error_console, show_path=False)]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    config_dir: Path | None = typer.Option(
        None,
        "--config-dir",
        "-c",
        help="Config directory (default: ~/.config/discogs-auth).",
        envvar="DISCOGS_CLI_CONFIG_DIR",
    ),
) -> None:
    """Discogs OAuth command-line interface.

    Log in to Discogs once and keep the resulting access token for later use.
    """
    _configure_logging(verbose)
    ctx.obj = CLIConfig(
        verbose=verbose,
        config_dir=config_dir or _get_config_dir(),
    )
