"""Login credential storage and persistence."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from discogs_oauth.models.auth import SavedLogin

logger = logging.getLogger(__name__)


def _get_token_path() -> Path:
    """Get default credential storage path."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
    return base / "discogs-oauth" / "login.json"


@dataclass
class CredentialStore:
    """Persistent storage for a completed login.

    Stores the identity and access token pair in a JSON file. For production
    use, consider encrypting the file or using a secrets manager.
    """

    path: Path

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or _get_token_path()

    def save(self, login: SavedLogin) -> None:
        """Save a login to storage."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(login.model_dump_json(indent=2))

        # Set restrictive permissions (owner read/write only)
        self.path.chmod(0o600)

    def load(self) -> SavedLogin | None:
        """Load the saved login.

        Returns None if nothing is stored or the file is unreadable.
        """
        if not self.path.exists():
            return None

        try:
            return SavedLogin.model_validate_json(self.path.read_text())
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable login file %s: %s", self.path, e)
            return None

    def clear(self) -> None:
        """Remove stored login."""
        if self.path.exists():
            self.path.unlink()

    def has_login(self) -> bool:
        """Check if a login is stored."""
        return self.path.exists()
