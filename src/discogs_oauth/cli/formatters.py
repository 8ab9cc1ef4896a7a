"""Output helpers for CLI commands."""

from rich.console import Console
from rich.table import Table

from discogs_oauth.models.auth import Identity

console = Console()
error_console = Console(stderr=True)


def print_identity(identity: Identity, *, title: str = "Discogs identity") -> None:
    """Print an identity as a two-column table."""
    table = Table(title=title, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Username", identity.username)
    table.add_row("Avatar", identity.avatar_url or "[dim](none)[/dim]")
    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")
