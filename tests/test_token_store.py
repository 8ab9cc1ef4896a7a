"""Tests for saved login persistence."""

import stat
from pathlib import Path

import pytest

from discogs_oauth import AccessToken, CredentialStore, Identity, SavedLogin


@pytest.fixture
def login() -> SavedLogin:
    return SavedLogin(
        identity=Identity(username="crate_digger", avatar_url="https://i.discogs.com/a.jpg"),
        access_token=AccessToken(token="ACC", token_secret="SEC"),
    )


@pytest.fixture
def store(tmp_path: Path) -> CredentialStore:
    return CredentialStore(path=tmp_path / "nested" / "login.json")


class TestCredentialStore:
    """Tests for CredentialStore."""

    def test_save_and_load(self, store: CredentialStore, login: SavedLogin) -> None:
        store.save(login)

        assert store.has_login()
        assert store.load() == login

    def test_file_is_owner_only(self, store: CredentialStore, login: SavedLogin) -> None:
        store.save(login)

        assert stat.S_IMODE(store.path.stat().st_mode) == 0o600

    def test_load_missing_returns_none(self, store: CredentialStore) -> None:
        assert store.load() is None
        assert not store.has_login()

    def test_load_corrupt_returns_none(self, store: CredentialStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text('{"identity": {"username": ""}}')

        assert store.load() is None

    def test_clear(self, store: CredentialStore, login: SavedLogin) -> None:
        store.save(login)
        store.clear()

        assert not store.has_login()
        store.clear()  # no error when already gone

    def test_default_path_uses_xdg_data_home(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert CredentialStore().path == tmp_path / "discogs-oauth" / "login.json"
