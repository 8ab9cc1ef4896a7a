"""Main Discogs OAuth client."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx

from discogs_oauth.auth import CredentialStore, DiscogsAuth, LoginFlow
from discogs_oauth.config import DiscogsConfig

if TYPE_CHECKING:
    from types import TracebackType

    from discogs_oauth.auth.flow import Handshake
    from discogs_oauth.models.auth import SavedLogin


class DiscogsClient:
    """Discogs OAuth client.

    Bundles configuration, the handshake handler and credential storage.

    Usage (context manager - recommended for connection pooling):
        async with DiscogsClient(config) as client:
            flow = client.login_flow("https://example.com/callback")
            pending = await flow.start()

    Usage (external HTTP client - shared across integrations):
        http_client = httpx.AsyncClient(timeout=5.0)
        client = DiscogsClient(config, http_client=http_client)
        # Client uses shared pool, doesn't close it

    Usage (no pooling - creates connection per request):
        client = DiscogsClient(config)
        request_token = await client.auth.request_token(config.credential, callback_url)
    """

    def __init__(
        self,
        config: DiscogsConfig,
        *,
        credential_store: CredentialStore | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Discogs configuration with credentials
            credential_store: Optional login storage (uses default if not provided)
            http_client: Optional httpx.AsyncClient for connection pooling.
                        If provided, the client will use this pool and NOT close it.
        """
        self.config = config
        self.credential_store = credential_store or CredentialStore()
        self.auth = DiscogsAuth(config, http_client)

        # HTTP client management
        self._http_client = http_client
        self._owns_http_client = http_client is None  # We manage lifecycle if not provided

    async def open(self) -> None:
        """Open connection pool for HTTP requests."""
        if self._http_client is None and self._owns_http_client:
            self._http_client = httpx.AsyncClient(
                timeout=self.config.timeout,
                headers={"User-Agent": self.config.user_agent},
            )
            self.auth.set_http_client(self._http_client)

    async def close(self) -> None:
        """Close connection pool.

        Only closes the pool if this client owns it (not external).
        """
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self.auth.set_http_client(None)

    async def __aenter__(self) -> DiscogsClient:
        """Async context manager entry - opens connection pool."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes connection pool."""
        await self.close()

    @classmethod
    def from_env(cls) -> DiscogsClient:
        """Create client from environment variables.

        Expects:
        - DISCOGS_CONSUMER_KEY
        - DISCOGS_CONSUMER_SECRET
        """
        return cls(DiscogsConfig.from_env())

    def login_flow(
        self,
        callback_url: str,
        *,
        on_transition: Callable[[Handshake], None] | None = None,
    ) -> LoginFlow:
        """Create a login flow for this application's credential."""
        return LoginFlow(
            self.auth,
            self.config.credential,
            callback_url,
            on_transition=on_transition,
        )

    def load_login(self) -> SavedLogin | None:
        """Load the saved login, if any."""
        return self.credential_store.load()

    def save_login(self, login: SavedLogin) -> None:
        """Save a completed login."""
        self.credential_store.save(login)

    def clear_login(self) -> None:
        """Clear the saved login."""
        self.credential_store.clear()
