"""Discogs OAuth 1.0a client library.

An async, typed client for the Discogs three-legged OAuth handshake.

Example:
    from discogs_oauth import DiscogsClient, DiscogsConfig

    config = DiscogsConfig(consumer_key="your_key", consumer_secret="your_secret")

    async with DiscogsClient(config) as client:
        flow = client.login_flow("https://example.com/auth/callback")

        # Step 1: request token, then send the user to Discogs
        pending = await flow.start()
        pending.raise_for_failure()
        print(f"Visit: {pending.request_token.authorization_url}")

        # Step 2: redeem the verifier from the redirect and resolve identity
        done = await flow.complete_from_callback(pending, input("Callback URL: "))
        done.raise_for_failure()
        print(done.identity.username, done.identity.avatar_url)
"""

from discogs_oauth.auth import (
    CredentialStore,
    DiscogsAuth,
    Handshake,
    HandshakeFailure,
    HandshakeState,
    LoginFlow,
)
from discogs_oauth.client import DiscogsClient
from discogs_oauth.config import DiscogsConfig
from discogs_oauth.exceptions import (
    DiscogsAuthError,
    DiscogsError,
    DiscogsValidationError,
    HandshakeStateError,
    MalformedResponseError,
    NetworkError,
    ProtocolError,
)
from discogs_oauth.models import (
    AccessToken,
    AppCredential,
    AuthorizationCallback,
    AvatarFound,
    AvatarIgnored,
    Identity,
    RequestToken,
    SavedLogin,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "DiscogsClient",
    "DiscogsConfig",
    # Handshake
    "CredentialStore",
    "DiscogsAuth",
    "Handshake",
    "HandshakeFailure",
    "HandshakeState",
    "LoginFlow",
    # Models
    "AccessToken",
    "AppCredential",
    "AuthorizationCallback",
    "AvatarFound",
    "AvatarIgnored",
    "Identity",
    "RequestToken",
    "SavedLogin",
    # Exceptions
    "DiscogsAuthError",
    "DiscogsError",
    "DiscogsValidationError",
    "HandshakeStateError",
    "MalformedResponseError",
    "NetworkError",
    "ProtocolError",
]
