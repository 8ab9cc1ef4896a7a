"""Configuration management for the Discogs OAuth client."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from discogs_oauth.models.auth import AppCredential

DEFAULT_USER_AGENT = "HolyGrails/1.0"


def _get_config_dir() -> Path:
    """Get XDG-compliant config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "discogs-oauth"
    return Path.home() / ".config" / "discogs-oauth"


@dataclass(frozen=True, slots=True)
class DiscogsConfig:
    """Discogs API configuration."""

    consumer_key: str
    consumer_secret: str
    base_url: str = "https://api.discogs.com"
    authorize_url: str = "https://www.discogs.com/oauth/authorize"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 5.0

    @property
    def credential(self) -> AppCredential:
        """The application's consumer key pair."""
        return AppCredential(
            consumer_key=self.consumer_key,
            consumer_secret=self.consumer_secret,
        )

    @property
    def request_token_url(self) -> str:
        return f"{self.base_url}/oauth/request_token"

    @property
    def access_token_url(self) -> str:
        return f"{self.base_url}/oauth/access_token"

    @property
    def identity_url(self) -> str:
        return f"{self.base_url}/oauth/identity"

    def profile_url(self, username: str) -> str:
        """Get the public profile URL for a user."""
        return f"{self.base_url}/users/{quote(username, safe='')}"

    @classmethod
    def from_env(cls) -> DiscogsConfig:
        """Create config from environment variables.

        Expected env vars:
        - DISCOGS_CONSUMER_KEY
        - DISCOGS_CONSUMER_SECRET
        - DISCOGS_USER_AGENT (optional)
        """
        consumer_key = os.environ.get("DISCOGS_CONSUMER_KEY")
        consumer_secret = os.environ.get("DISCOGS_CONSUMER_SECRET")

        if not consumer_key or not consumer_secret:
            msg = (
                "Missing required environment variables: "
                "DISCOGS_CONSUMER_KEY and DISCOGS_CONSUMER_SECRET"
            )
            raise ValueError(msg)

        return cls(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            user_agent=os.environ.get("DISCOGS_USER_AGENT") or DEFAULT_USER_AGENT,
        )

    @classmethod
    def from_file(cls, path: Path | None = None) -> DiscogsConfig:
        """Load config from JSON file.

        Default path: ~/.config/discogs-oauth/config.json

        Expected format:
        {
            "consumer_key": "...",
            "consumer_secret": "...",
            "user_agent": "..."       (optional)
        }
        """
        if path is None:
            path = _get_config_dir() / "config.json"

        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = json.load(f)

        return cls(
            consumer_key=data["consumer_key"],
            consumer_secret=data["consumer_secret"],
            user_agent=data.get("user_agent") or DEFAULT_USER_AGENT,
        )

    @classmethod
    def load(cls) -> DiscogsConfig:
        """Load config from environment or file (env takes precedence)."""
        try:
            return cls.from_env()
        except ValueError:
            return cls.from_file()
