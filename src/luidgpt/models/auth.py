"""
Authentication payloads and client-side input checks.
"""

import re
from typing import Optional

from .base import LuidModel
from .user import User

EMAIL_PATTERN = re.compile(r"[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}")
PASSWORD_PATTERN = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}", re.DOTALL)


class AuthTokens(LuidModel):
    access_token: str
    id_token: str
    refresh_token: str
    expires_in: int = 3600


class AuthTokensResponse(LuidModel):
    success: bool = True
    tokens: AuthTokens


class RegisterResponse(LuidModel):
    """Result of ``POST /auth/register``; tokens are present when no confirmation is needed."""

    success: bool = True
    user_sub: str
    needs_confirmation: bool
    message: str = ""
    email: str
    tokens: Optional[AuthTokens] = None


class RegistrationResult(LuidModel):
    """Outcome of the full sign-up flow; `user` is None while email confirmation is pending."""

    response: RegisterResponse
    user: Optional[User] = None

    @property
    def needs_confirmation(self) -> bool:
        return self.user is None


class UserResponse(LuidModel):
    success: bool = True
    user: User


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_password(password: str) -> bool:
    """At least 8 characters with a lowercase letter, an uppercase letter and a digit."""
    return PASSWORD_PATTERN.fullmatch(password) is not None


def password_strength(password: str) -> str:
    """Return Weak, Fair, Good or Strong; empty input gives an empty string."""
    if not password:
        return ""

    score = sum([
        len(password) >= 8,
        re.search(r"[A-Z]", password) is not None,
        re.search(r"[a-z]", password) is not None,
        re.search(r"[0-9]", password) is not None,
        re.search(r"[^A-Za-z0-9]", password) is not None,
    ])

    if score <= 1:
        return "Weak"
    if score <= 3:
        return "Fair"
    if score == 4:
        return "Good"
    return "Strong"
