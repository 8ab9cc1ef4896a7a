"""CLI configuration with XDG-compliant paths and environment variable overrides."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from discogs_oauth.config import DEFAULT_USER_AGENT, DiscogsConfig

logger = logging.getLogger(__name__)


def _default_config_dir() -> Path:
    """Get XDG-compliant config directory for credentials.

    Uses XDG_CONFIG_HOME if set, otherwise ~/.config/discogs-auth.
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "discogs-auth"
    return Path.home() / ".config" / "discogs-auth"


def _default_data_dir() -> Path:
    """Get XDG-compliant data directory for saved logins.

    Uses XDG_DATA_HOME if set, otherwise ~/.local/share/discogs-auth.
    """
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data) / "discogs-auth"
    return Path.home() / ".local" / "share" / "discogs-auth"


@dataclass
class CLIConfig:
    """Configuration passed through Typer context.

    Attributes:
        verbose: Enable verbose output.
        config_dir: Directory for configuration files (credentials).
        data_dir: Directory for data files (saved login).

    Directory Structure:
        config_dir/
        └── credentials.json    # Consumer key and secret

        data_dir/
        └── login.json          # Identity and access token
    """

    verbose: bool = False
    config_dir: Path = field(default_factory=_default_config_dir)
    data_dir: Path = field(default_factory=_default_data_dir)

    @property
    def login_path(self) -> Path:
        """Get the saved login file path."""
        return self.data_dir / "login.json"

    @property
    def credentials_path(self) -> Path:
        """Get the credentials file path."""
        return self.config_dir / "credentials.json"

    def load_config(self) -> DiscogsConfig:
        """Load credentials from config file with environment variable overrides.

        Loading priority:
        1. Load from credentials.json in the config directory
        2. Override individual values with environment variables if set

        Environment variables:
        - DISCOGS_CONSUMER_KEY: Overrides consumer_key from file
        - DISCOGS_CONSUMER_SECRET: Overrides consumer_secret from file
        - DISCOGS_USER_AGENT: Overrides user_agent from file

        Raises:
            ValueError: If credentials cannot be determined from file or env vars
        """
        data: dict[str, str] = {}

        if self.credentials_path.exists():
            try:
                with self.credentials_path.open() as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Failed to read %s: %s", self.credentials_path, e)

        consumer_key = os.environ.get("DISCOGS_CONSUMER_KEY") or data.get("consumer_key")
        consumer_secret = os.environ.get("DISCOGS_CONSUMER_SECRET") or data.get("consumer_secret")
        user_agent = (
            os.environ.get("DISCOGS_USER_AGENT") or data.get("user_agent") or DEFAULT_USER_AGENT
        )

        if not consumer_key or not consumer_secret:
            missing = []
            if not consumer_key:
                missing.append("consumer_key")
            if not consumer_secret:
                missing.append("consumer_secret")

            msg = (
                f"Missing credentials: {', '.join(missing)}. "
                f"Set via environment variables (DISCOGS_CONSUMER_KEY, DISCOGS_CONSUMER_SECRET) "
                f"or create config file at {self.credentials_path}"
            )
            raise ValueError(msg)

        return DiscogsConfig(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            user_agent=user_agent,
        )
