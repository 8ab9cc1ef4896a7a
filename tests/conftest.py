"""Shared fixtures: an in-memory Discogs served through httpx.MockTransport."""

from __future__ import annotations

import itertools
from collections.abc import AsyncIterator, Callable

import httpx
import pytest

from discogs_oauth import DiscogsAuth, DiscogsConfig
from tests.helpers import FakeDiscogs, Handler


@pytest.fixture
def config() -> DiscogsConfig:
    """Create a test configuration."""
    return DiscogsConfig(consumer_key="test_key", consumer_secret="test_secret")


@pytest.fixture
def fake_discogs(config: DiscogsConfig) -> FakeDiscogs:
    return FakeDiscogs(config)


@pytest.fixture
async def http_client(fake_discogs: FakeDiscogs) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_discogs.handler)) as client:
        yield client


@pytest.fixture
def auth(config: DiscogsConfig, http_client: httpx.AsyncClient) -> DiscogsAuth:
    """DiscogsAuth wired to the fake Discogs."""
    return DiscogsAuth(config, http_client)


@pytest.fixture
async def make_auth(
    config: DiscogsConfig,
) -> AsyncIterator[Callable[[Handler], DiscogsAuth]]:
    """Factory for a DiscogsAuth whose transport answers with ``handler``.

    Uses a deterministic nonce sequence and a fixed clock.
    """
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler) -> DiscogsAuth:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        counter = itertools.count(1)
        return DiscogsAuth(
            config,
            client,
            nonce_factory=lambda: f"nonce{next(counter)}",
            clock=lambda: 1_700_000_000.5,
        )

    yield factory

    for client in clients:
        await client.aclose()
