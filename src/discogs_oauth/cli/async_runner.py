"""Async command support for Typer."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from functools import wraps
from typing import Any, TypeVar

import typer
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from discogs_oauth.exceptions import DiscogsAuthError, DiscogsValidationError, NetworkError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def describe_error(e: DiscogsAuthError) -> str:
    """One-line description of a failed handshake step for the terminal."""
    stage = f" during {e.stage.replace('_', ' ')}" if e.stage else ""
    return f"Discogs login failed{stage} ({e.kind}): {e.message}"


async def retry_on_network_error(
    fn: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    wait: wait_base | None = None,
) -> T:
    """Retry a whole handshake step while it fails with NetworkError.

    Only safe for steps that can be repeated, such as requesting a token.
    Redeeming a verifier must not be retried this way.
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception_type(NetworkError),
        stop=stop_after_attempt(attempts),
        wait=wait or wait_exponential(multiplier=1, min=1, max=8),
        before_sleep=before_sleep_log(logger, logging.INFO),
        reraise=True,
    )
    return await retrying(fn)


def async_command(f: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., T]:
    """Decorator to run async Typer commands.

    Reports handshake errors on stderr and exits with status 1.

    Usage:
        @app.command()
        @async_command
        async def my_command(ctx: typer.Context):
            ...
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        from discogs_oauth.cli.formatters import print_error

        try:
            return asyncio.run(f(*args, **kwargs))
        except DiscogsAuthError as e:
            print_error(describe_error(e))
            raise typer.Exit(1) from None
        except DiscogsValidationError as e:
            print_error(e.message)
            raise typer.Exit(1) from None

    return wrapper
