"""
Credential storage for LuidGPT.

Tokens and the signed-in user's identity are kept in the system keyring.
When no keyring backend is usable the values go to a JSON file readable
only by the current user.
"""

from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING
import json
import logging
import os

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

if TYPE_CHECKING:
    from ...models.auth import AuthTokens

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "com.luidgpt.accessToken"
ID_TOKEN_KEY = "com.luidgpt.idToken"
REFRESH_TOKEN_KEY = "com.luidgpt.refreshToken"
USER_ID_KEY = "com.luidgpt.userId"
USER_EMAIL_KEY = "com.luidgpt.userEmail"

ALL_KEYS = (ACCESS_TOKEN_KEY, ID_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_ID_KEY, USER_EMAIL_KEY)


class BaseTokenStore:
    """Typed credential accessors over a key/value backend."""

    def save(self, key: str, value: str) -> bool:
        raise NotImplementedError

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    # Access token
    def save_access_token(self, token: str) -> bool:
        return self.save(ACCESS_TOKEN_KEY, token)

    def get_access_token(self) -> Optional[str]:
        return self.get(ACCESS_TOKEN_KEY)

    def delete_access_token(self) -> bool:
        return self.delete(ACCESS_TOKEN_KEY)

    # ID token
    def save_id_token(self, token: str) -> bool:
        return self.save(ID_TOKEN_KEY, token)

    def get_id_token(self) -> Optional[str]:
        return self.get(ID_TOKEN_KEY)

    def delete_id_token(self) -> bool:
        return self.delete(ID_TOKEN_KEY)

    # Refresh token
    def save_refresh_token(self, token: str) -> bool:
        return self.save(REFRESH_TOKEN_KEY, token)

    def get_refresh_token(self) -> Optional[str]:
        return self.get(REFRESH_TOKEN_KEY)

    def delete_refresh_token(self) -> bool:
        return self.delete(REFRESH_TOKEN_KEY)

    # User identity
    def save_user_id(self, user_id: str) -> bool:
        return self.save(USER_ID_KEY, user_id)

    def get_user_id(self) -> Optional[str]:
        return self.get(USER_ID_KEY)

    def delete_user_id(self) -> bool:
        return self.delete(USER_ID_KEY)

    def save_user_email(self, email: str) -> bool:
        return self.save(USER_EMAIL_KEY, email)

    def get_user_email(self) -> Optional[str]:
        return self.get(USER_EMAIL_KEY)

    def delete_user_email(self) -> bool:
        return self.delete(USER_EMAIL_KEY)

    def save_tokens(self, tokens: "AuthTokens") -> bool:
        """Persist the tokens returned by a login or verification call."""
        saved = self.save_access_token(tokens.access_token)
        saved = self.save_id_token(tokens.id_token) and saved
        saved = self.save_refresh_token(tokens.refresh_token) and saved
        return saved

    def has_access_token(self) -> bool:
        return self.get_access_token() is not None

    def clear_all(self) -> None:
        """Remove every stored credential."""
        for key in ALL_KEYS:
            self.delete(key)
        logger.debug("Cleared stored credentials")


class InMemoryTokenStore(BaseTokenStore):
    """Process-local store used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def save(self, key: str, value: str) -> bool:
        self._values[key] = value
        return True

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def delete(self, key: str) -> bool:
        self._values.pop(key, None)
        return True


class TokenStore(BaseTokenStore):
    """
    Keyring-backed credential store with a private JSON file fallback.

    Args:
        service: Keyring service name
        fallback_path: JSON file used when the keyring cannot be used
        use_keyring: False skips the keyring entirely
    """

    def __init__(self, service: str, fallback_path: Path, use_keyring: bool = True):
        self.service = service
        self.fallback_path = Path(fallback_path)
        self.use_keyring = use_keyring

    def save(self, key: str, value: str) -> bool:
        self.delete(key)

        if self.use_keyring:
            try:
                keyring.set_password(self.service, key, value)
                return True
            except KeyringError as e:
                logger.warning(f"Keyring unavailable ({e}), using file fallback for: {key}")

        values = self._read_fallback()
        values[key] = value
        self._write_fallback(values)
        return True

    def get(self, key: str) -> Optional[str]:
        if self.use_keyring:
            try:
                value = keyring.get_password(self.service, key)
                if value is not None:
                    return value
            except KeyringError as e:
                logger.debug(f"Keyring read failed for {key}: {e}")

        value = self._read_fallback().get(key)
        if value is not None:
            logger.debug(f"Retrieved from file fallback: {key}")
        return value

    def delete(self, key: str) -> bool:
        deleted = True
        if self.use_keyring:
            try:
                keyring.delete_password(self.service, key)
            except PasswordDeleteError:
                pass
            except KeyringError as e:
                logger.debug(f"Keyring delete failed for {key}: {e}")
                deleted = False

        values = self._read_fallback()
        if key in values:
            del values[key]
            self._write_fallback(values)
        return deleted

    def _read_fallback(self) -> Dict[str, str]:
        if not self.fallback_path.exists():
            return {}
        try:
            data = json.loads(self.fallback_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable credentials file {self.fallback_path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_fallback(self, values: Dict[str, str]) -> None:
        self.fallback_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.fallback_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(values, f, indent=2)
