"""
Credential storage for LuidGPT.
"""

from .token_store import (
    ACCESS_TOKEN_KEY,
    ID_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    USER_ID_KEY,
    USER_EMAIL_KEY,
    BaseTokenStore,
    InMemoryTokenStore,
    TokenStore,
)

__all__ = [
    "ACCESS_TOKEN_KEY",
    "ID_TOKEN_KEY",
    "REFRESH_TOKEN_KEY",
    "USER_ID_KEY",
    "USER_EMAIL_KEY",
    "BaseTokenStore",
    "InMemoryTokenStore",
    "TokenStore",
]
