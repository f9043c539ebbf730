"""Tests for credential storage."""

import json
import stat
from pathlib import Path
from typing import Dict, Tuple

import keyring
import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from luidgpt.core.storage import (
    ACCESS_TOKEN_KEY,
    ID_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    USER_EMAIL_KEY,
    InMemoryTokenStore,
    TokenStore,
)
from luidgpt.models import AuthTokens


class FakeKeyring:
    """Dictionary standing in for the system keyring."""

    def __init__(self, broken: bool = False):
        self.values: Dict[Tuple[str, str], str] = {}
        self.broken = broken

    def set_password(self, service: str, key: str, value: str) -> None:
        if self.broken:
            raise KeyringError("no backend")
        self.values[(service, key)] = value

    def get_password(self, service: str, key: str):
        if self.broken:
            raise KeyringError("no backend")
        return self.values.get((service, key))

    def delete_password(self, service: str, key: str) -> None:
        if self.broken:
            raise KeyringError("no backend")
        if (service, key) not in self.values:
            raise PasswordDeleteError("not found")
        del self.values[(service, key)]


def _install(monkeypatch: pytest.MonkeyPatch, fake: FakeKeyring) -> FakeKeyring:
    monkeypatch.setattr(keyring, "set_password", fake.set_password)
    monkeypatch.setattr(keyring, "get_password", fake.get_password)
    monkeypatch.setattr(keyring, "delete_password", fake.delete_password)
    return fake


@pytest.fixture
def credentials_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "credentials.json"


class TestInMemoryTokenStore:

    def test_typed_accessors(self) -> None:
        store = InMemoryTokenStore()
        store.save_user_email("ada@example.com")
        store.save_user_id("user-1")

        assert store.get_user_email() == "ada@example.com"
        assert store.get_user_id() == "user-1"
        assert not store.has_access_token()

    def test_save_tokens_and_clear_all(self) -> None:
        store = InMemoryTokenStore()
        store.save_tokens(AuthTokens(access_token="a", id_token="i", refresh_token="r"))

        assert store.get_access_token() == "a"
        assert store.get_id_token() == "i"
        assert store.get_refresh_token() == "r"

        store.clear_all()
        assert store.get_access_token() is None
        assert store.get_refresh_token() is None

    def test_delete_missing_key(self) -> None:
        assert InMemoryTokenStore().delete_access_token() is True


class TestTokenStoreKeyring:

    def test_round_trip_through_keyring(self, monkeypatch: pytest.MonkeyPatch, credentials_path: Path) -> None:
        fake = _install(monkeypatch, FakeKeyring())
        store = TokenStore("com.luidgpt", credentials_path)

        assert store.save_access_token("token-1") is True
        assert fake.values[("com.luidgpt", ACCESS_TOKEN_KEY)] == "token-1"
        assert store.get_access_token() == "token-1"
        assert not credentials_path.exists()

    def test_save_replaces_existing_value(self, monkeypatch: pytest.MonkeyPatch, credentials_path: Path) -> None:
        _install(monkeypatch, FakeKeyring())
        store = TokenStore("com.luidgpt", credentials_path)

        store.save_id_token("old")
        store.save_id_token("new")
        assert store.get_id_token() == "new"

    def test_delete_missing_entry_succeeds(self, monkeypatch: pytest.MonkeyPatch, credentials_path: Path) -> None:
        _install(monkeypatch, FakeKeyring())
        store = TokenStore("com.luidgpt", credentials_path)
        assert store.delete_refresh_token() is True

    def test_clear_all(self, monkeypatch: pytest.MonkeyPatch, credentials_path: Path) -> None:
        fake = _install(monkeypatch, FakeKeyring())
        store = TokenStore("com.luidgpt", credentials_path)
        store.save_tokens(AuthTokens(access_token="a", id_token="i", refresh_token="r"))
        store.save_user_email("ada@example.com")

        store.clear_all()
        assert fake.values == {}


class TestTokenStoreFallback:

    def test_broken_keyring_uses_private_file(self, monkeypatch: pytest.MonkeyPatch, credentials_path: Path) -> None:
        _install(monkeypatch, FakeKeyring(broken=True))
        store = TokenStore("com.luidgpt", credentials_path)

        assert store.save_access_token("token-1") is True
        assert store.get_access_token() == "token-1"

        assert json.loads(credentials_path.read_text()) == {ACCESS_TOKEN_KEY: "token-1"}
        assert stat.S_IMODE(credentials_path.stat().st_mode) == 0o600

    def test_keyring_disabled(self, credentials_path: Path) -> None:
        store = TokenStore("com.luidgpt", credentials_path, use_keyring=False)
        store.save_user_email("ada@example.com")
        store.save_refresh_token("r")

        store.delete_refresh_token()
        assert json.loads(credentials_path.read_text()) == {USER_EMAIL_KEY: "ada@example.com"}
        assert store.get_refresh_token() is None

    def test_unreadable_file_is_ignored(self, credentials_path: Path) -> None:
        credentials_path.parent.mkdir(parents=True)
        credentials_path.write_text("not json")

        store = TokenStore("com.luidgpt", credentials_path, use_keyring=False)
        assert store.get_access_token() is None

        store.save_id_token("i")
        assert json.loads(credentials_path.read_text()) == {ID_TOKEN_KEY: "i"}

    def test_delete_reports_keyring_failure(self, monkeypatch: pytest.MonkeyPatch, credentials_path: Path) -> None:
        _install(monkeypatch, FakeKeyring(broken=True))
        store = TokenStore("com.luidgpt", credentials_path)
        store.save_access_token("token-1")

        assert store.delete_access_token() is False
        assert store.get_access_token() is None
