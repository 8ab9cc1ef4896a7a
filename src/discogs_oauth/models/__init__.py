"""Pydantic models for the Discogs OAuth handshake."""

from discogs_oauth.models.auth import (
    AccessToken,
    AppCredential,
    AuthorizationCallback,
    AvatarFound,
    AvatarIgnored,
    AvatarLookup,
    Identity,
    RequestToken,
    SavedLogin,
)

__all__ = [
    "AccessToken",
    "AppCredential",
    "AuthorizationCallback",
    "AvatarFound",
    "AvatarIgnored",
    "AvatarLookup",
    "Identity",
    "RequestToken",
    "SavedLogin",
]
