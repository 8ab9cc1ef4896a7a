"""OAuth authentication for the Discogs API."""

from discogs_oauth.auth.flow import Handshake, HandshakeFailure, HandshakeState, LoginFlow
from discogs_oauth.auth.oauth import DiscogsAuth
from discogs_oauth.auth.tokens import CredentialStore

__all__ = [
    "CredentialStore",
    "DiscogsAuth",
    "Handshake",
    "HandshakeFailure",
    "HandshakeState",
    "LoginFlow",
]
