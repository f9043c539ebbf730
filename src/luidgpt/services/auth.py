"""
Authentication service for LuidGPT.

Handles sign-in, sign-up with email confirmation, password reset and the
local credential lifecycle. Request pipeline errors are translated into
the AuthError family so callers can show a precise message.
"""

from typing import Awaitable, Optional, TypeVar
import logging

from ..core.client import APIClient, APIError, map_api_error_to_auth_error
from ..core.storage import BaseTokenStore
from ..models import (
    AuthTokens,
    AuthTokensResponse,
    MessageResponse,
    RegisterResponse,
    RegistrationResult,
    User,
    UserResponse,
)
from .base import BaseService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthService(BaseService):
    """Sign-in, sign-up and session management."""

    def __init__(self, client: APIClient, token_store: BaseTokenStore):
        super().__init__(client)
        self.token_store = token_store

    # Authentication state

    def is_authenticated(self) -> bool:
        return self.token_store.has_access_token()

    def get_access_token(self) -> Optional[str]:
        return self.token_store.get_access_token()

    # Sign-in

    async def login(self, email: str, password: str) -> User:
        """Exchange credentials for tokens, store them and return the profile."""
        logger.info(f"Logging in as {email}")
        response = await self._call(self.client.post(
            "/auth/login",
            {"email": email, "password": password},
            requires_auth=False,
            response_model=AuthTokensResponse,
        ))
        return await self._start_session(response.tokens)

    async def register(self, email: str, password: str, first_name: str, last_name: str) -> RegisterResponse:
        response = await self._call(self.client.post(
            "/auth/register",
            {"email": email, "password": password, "firstName": first_name, "lastName": last_name},
            requires_auth=False,
            response_model=RegisterResponse,
        ))
        logger.info(f"Registration successful: {response.message}")
        return response

    async def complete_registration(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> RegistrationResult:
        """
        Register and sign in when the backend allows it.

        Returns a result without a user when the account still needs email
        confirmation. Tokens issued at sign-up are used directly; otherwise
        the new credentials are used to log in.
        """
        response = await self.register(email, password, first_name, last_name)

        if response.needs_confirmation:
            logger.info(f"Confirmation code sent to {response.email}")
            return RegistrationResult(response=response)

        if response.tokens is not None:
            user = await self._start_session(response.tokens)
        else:
            logger.debug("Registration returned no tokens, falling back to login")
            user = await self.login(email, password)
        return RegistrationResult(response=response, user=user)

    async def verify_email(self, email: str, code: str) -> User:
        """Confirm the sign-up code; the backend answers with tokens."""
        response = await self._call(self.client.post(
            "/auth/verify-email",
            {"email": email, "code": code},
            requires_auth=False,
            response_model=AuthTokensResponse,
        ))
        return await self._start_session(response.tokens)

    async def resend_verification_code(self, email: str) -> None:
        await self._call(self.client.post(
            "/auth/resend-code", {"email": email}, requires_auth=False, response_model=MessageResponse,
        ))

    # Password reset

    async def forgot_password(self, email: str) -> None:
        """Ask the backend to email a reset code."""
        await self._call(self.client.post(
            "/auth/forgot-password", {"email": email}, requires_auth=False, response_model=MessageResponse,
        ))

    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        await self._call(self.client.post(
            "/auth/reset-password",
            {"email": email, "code": code, "newPassword": new_password},
            requires_auth=False,
            response_model=MessageResponse,
        ))

    # Sign-out

    async def logout(self) -> None:
        """Notify the backend when signed in, then always drop local credentials."""
        if self.token_store.has_access_token():
            try:
                await self.client.post("/auth/logout", response_model=MessageResponse)
            except APIError as e:
                logger.warning(f"Logout API call failed: {e}")
        self.token_store.clear_all()

    # Profile

    async def fetch_user_profile(self) -> User:
        response = await self._call(self.client.get("/auth/me", response_model=UserResponse))
        return response.user

    async def _start_session(self, tokens: AuthTokens) -> User:
        self.token_store.save_tokens(tokens)
        user = await self.fetch_user_profile()
        self.token_store.save_user_id(user.id)
        self.token_store.save_user_email(user.email)
        return user

    @staticmethod
    async def _call(request: Awaitable[T]) -> T:
        try:
            return await request
        except APIError as e:
            raise map_api_error_to_auth_error(e) from e
