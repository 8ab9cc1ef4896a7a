"""Tests for connection pooling functionality."""

import httpx
import pytest

from discogs_oauth import CredentialStore, DiscogsClient, DiscogsConfig, HandshakeState
from tests.helpers import FakeDiscogs


@pytest.fixture
def store(tmp_path) -> CredentialStore:
    return CredentialStore(path=tmp_path / "login.json")


class TestContextManager:
    """Tests for async context manager usage."""

    async def test_context_manager_creates_http_client(
        self, config: DiscogsConfig, store: CredentialStore
    ) -> None:
        """Context manager should create an http client on entry."""
        async with DiscogsClient(config, credential_store=store) as client:
            assert isinstance(client._http_client, httpx.AsyncClient)
            assert client._http_client.headers["User-Agent"] == "HolyGrails/1.0"

    async def test_context_manager_closes_http_client(
        self, config: DiscogsConfig, store: CredentialStore
    ) -> None:
        """Context manager should close http client on exit."""
        async with DiscogsClient(config, credential_store=store) as client:
            assert client._http_client is not None

        assert client._http_client is None
        assert client.auth._http_client is None

    async def test_context_manager_propagates_to_auth(
        self, config: DiscogsConfig, store: CredentialStore
    ) -> None:
        async with DiscogsClient(config, credential_store=store) as client:
            assert client.auth._http_client is client._http_client


class TestExternalHttpClient:
    """Tests for external http client usage."""

    async def test_external_client_is_used(
        self, config: DiscogsConfig, store: CredentialStore, fake_discogs: FakeDiscogs
    ) -> None:
        """Login flows created by the client should go through the external pool."""
        external_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_discogs.handler))
        try:
            client = DiscogsClient(config, credential_store=store, http_client=external_client)
            pending = await client.login_flow("https://holygrails.test/cb").start()

            assert pending.state is HandshakeState.AWAITING_AUTHORIZATION
            assert len(fake_discogs.requests) == 1
        finally:
            await external_client.aclose()

    async def test_external_client_not_closed_by_context_manager(
        self, config: DiscogsConfig, store: CredentialStore
    ) -> None:
        """External http client should NOT be closed when exiting context manager."""
        external_client = httpx.AsyncClient(timeout=60.0)
        try:
            async with DiscogsClient(
                config, credential_store=store, http_client=external_client
            ) as client:
                assert client._http_client is external_client

            assert not external_client.is_closed
        finally:
            await external_client.aclose()


class TestFromEnv:
    def test_reads_credentials(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DISCOGS_CONSUMER_KEY", "env_key")
        monkeypatch.setenv("DISCOGS_CONSUMER_SECRET", "env_secret")

        client = DiscogsClient.from_env()

        assert client.config.credential.consumer_key == "env_key"
