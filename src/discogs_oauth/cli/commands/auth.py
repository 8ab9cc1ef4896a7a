"""Authentication commands."""

import webbrowser

import typer

from discogs_oauth.auth import CredentialStore
from discogs_oauth.auth.flow import Handshake, HandshakeState
from discogs_oauth.cli.async_runner import async_command, retry_on_network_error
from discogs_oauth.cli.config import CLIConfig
from discogs_oauth.cli.formatters import (
    console,
    print_error,
    print_identity,
    print_info,
    print_success,
    print_warning,
)
from discogs_oauth.client import DiscogsClient
from discogs_oauth.config import DiscogsConfig
from discogs_oauth.models.auth import SavedLogin

app = typer.Typer(no_args_is_help=True)

DEFAULT_CALLBACK_URL = "http://localhost:8765/auth/callback"

_STATUS_TEXT = {
    HandshakeState.REQUESTING_TOKEN: "Requesting a token from Discogs...",
    HandshakeState.EXCHANGING_TOKEN: "Authenticating...",
    HandshakeState.RESOLVING_IDENTITY: "Fetching your profile...",
}


def _show_transition(handshake: Handshake) -> None:
    if text := _STATUS_TEXT.get(handshake.state):
        print_info(text)


def _load_config(config: CLIConfig) -> DiscogsConfig:
    try:
        return config.load_config()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1) from None


@app.command("login")
@async_command
async def login(
    ctx: typer.Context,
    callback_url: str = typer.Option(
        DEFAULT_CALLBACK_URL,
        "--callback-url",
        help="URL Discogs redirects to after you approve access.",
    ),
    no_browser: bool = typer.Option(
        False,
        "--no-browser",
        help="Don't open browser automatically.",
    ),
) -> None:
    """Authenticate with Discogs OAuth.

    This command runs the OAuth flow:
    1. Requests a token and opens the Discogs approval page
    2. Prompts for the URL you were redirected to (or the bare verifier)
    3. Exchanges it for an access token and resolves your identity
    4. Saves the login for future use
    """
    config: CLIConfig = ctx.obj
    discogs_config = _load_config(config)
    store = CredentialStore(path=config.login_path)

    async with DiscogsClient(discogs_config, credential_store=store) as client:
        flow = client.login_flow(callback_url, on_transition=_show_transition)

        async def start() -> Handshake:
            handshake = await flow.start()
            handshake.raise_for_failure()
            return handshake

        pending = await retry_on_network_error(start)
        if pending.request_token is None:
            print_error("Discogs issued no request token.")
            raise typer.Exit(1)
        authorization_url = pending.request_token.authorization_url

        if no_browser:
            console.print("\nOpen this URL in your browser:")
            console.print(f"[link]{authorization_url}[/link]")
        else:
            print_info("Opening browser for authorization...")
            webbrowser.open(authorization_url)
            console.print("\n[dim]If browser didn't open, visit:[/dim]")
            console.print(f"[link]{authorization_url}[/link]")

        console.print()
        answer = typer.prompt("Paste the URL you were redirected to (or the verifier)").strip()

        if answer.startswith(("http://", "https://")):
            done = await flow.complete_from_callback(pending, answer)
        else:
            done = await flow.complete(pending, answer)
        done.raise_for_failure()

    if done.identity is None or done.access_token is None:
        print_error("Login finished without an identity or access token.")
        raise typer.Exit(1)
    client.save_login(SavedLogin(identity=done.identity, access_token=done.access_token))

    print_identity(done.identity)
    if not done.identity.avatar_url:
        print_warning("No avatar could be fetched; continuing without one.")
    print_success(f"Authenticated as {done.identity.username}! Login saved to {store.path}")


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Show the saved login, without contacting Discogs."""
    config: CLIConfig = ctx.obj
    store = CredentialStore(path=config.login_path)

    console.print(f"Login path: {store.path}")

    saved = store.load()
    if saved is None:
        print_info("Not authenticated - run 'discogs-auth auth login' to authenticate")
        return

    print_identity(saved.identity, title="Saved login")


@app.command("whoami")
@async_command
async def whoami(ctx: typer.Context) -> None:
    """Resolve the saved login's identity against Discogs.

    Also refreshes the saved avatar URL.
    """
    config: CLIConfig = ctx.obj
    discogs_config = _load_config(config)
    store = CredentialStore(path=config.login_path)

    saved = store.load()
    if saved is None:
        print_error("Not authenticated. Run 'discogs-auth auth login' first.")
        raise typer.Exit(1)

    async with DiscogsClient(discogs_config, credential_store=store) as client:
        identity = await client.auth.fetch_identity(discogs_config.credential, saved.access_token)

    if identity != saved.identity:
        client.save_login(SavedLogin(identity=identity, access_token=saved.access_token))

    print_identity(identity)


@app.command("logout")
def logout(ctx: typer.Context) -> None:
    """Log out and clear the saved login.

    Discogs has no token revocation endpoint; revoke access from your
    Discogs account settings if the token should stop working.
    """
    config: CLIConfig = ctx.obj
    store = CredentialStore(path=config.login_path)

    if not store.has_login():
        print_info("No login to clear.")
        return

    store.clear()
    print_success("Logged out.")
