"""OAuth handshake models."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, Field

from discogs_oauth.exceptions import DiscogsValidationError


class AppCredential(BaseModel):
    """Application consumer key pair, supplied by configuration."""

    consumer_key: str = Field(min_length=1, description="Consumer key")
    consumer_secret: str = Field(min_length=1, description="Consumer secret", repr=False)

    model_config = {"frozen": True}


class RequestToken(BaseModel):
    """OAuth request token (first step of OAuth flow).

    Valid for a single login attempt only. The secret never leaves the
    caller; it is needed again to redeem the verifier.
    """

    token: str = Field(min_length=1, description="Request token value")
    token_secret: str = Field(min_length=1, description="Request token secret", repr=False)
    authorization_url: str = Field(description="URL to redirect user for authorization")

    model_config = {"frozen": True}


class AccessToken(BaseModel):
    """OAuth access token (final step of OAuth flow)."""

    token: str = Field(min_length=1, description="Access token value")
    token_secret: str = Field(min_length=1, description="Access token secret", repr=False)

    model_config = {"frozen": True}


class AvatarFound(BaseModel):
    """Profile lookup produced an avatar URL."""

    url: str = Field(min_length=1)

    model_config = {"frozen": True}


class AvatarIgnored(BaseModel):
    """Profile lookup failed or had no avatar; the login carries on without one."""

    reason: str

    model_config = {"frozen": True}


AvatarLookup = AvatarFound | AvatarIgnored


class Identity(BaseModel):
    """Authenticated user's handle and avatar."""

    username: str = Field(min_length=1)
    avatar_url: str = Field(default="", description="Empty when the avatar lookup was ignored")

    model_config = {"frozen": True}

    @classmethod
    def from_lookup(cls, username: str, avatar: AvatarLookup) -> Identity:
        """Build an identity, degrading to an empty avatar when it was ignored."""
        avatar_url = avatar.url if isinstance(avatar, AvatarFound) else ""
        return cls(username=username, avatar_url=avatar_url)


class AuthorizationCallback(BaseModel):
    """Query parameters Discogs appends to the callback URL after approval."""

    oauth_token: str = Field(min_length=1)
    oauth_verifier: str = Field(min_length=1)

    model_config = {"frozen": True}

    @classmethod
    def from_url(cls, url: str) -> AuthorizationCallback:
        """Parse the redirect URL the user landed on.

        Raises:
            DiscogsValidationError: If either parameter is missing
        """
        query = parse_qs(urlsplit(url.strip()).query)
        token = query.get("oauth_token", [""])[0]
        verifier = query.get("oauth_verifier", [""])[0]

        if not token:
            raise DiscogsValidationError("Callback URL has no oauth_token", field="oauth_token")
        if not verifier:
            raise DiscogsValidationError(
                "Callback URL has no oauth_verifier", field="oauth_verifier"
            )

        return cls(oauth_token=token, oauth_verifier=verifier)


class SavedLogin(BaseModel):
    """Credentials persisted after a completed login."""

    identity: Identity
    access_token: AccessToken

    model_config = {"frozen": True}
