"""
Structured error system for the LuidGPT API client.

This module provides the flat API error family raised by the request
pipeline, the authentication error family raised by the auth service, and
helpers that turn either into user-facing text.
"""

from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class LuidError(Exception):
    """Base exception for all LuidGPT errors."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "message": self.message,
            "status": self.status,
            "code": self.code,
            "details": self.details,
            "type": self.__class__.__name__
        }

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# API errors
# ---------------------------------------------------------------------------

class APIError(LuidError):
    """Base class for errors raised by the HTTP request pipeline."""


class InvalidURLError(APIError):
    """The request URL could not be built."""

    def __init__(self, message: str = "Invalid URL", **kwargs):
        super().__init__(message, code="INVALID_URL", **kwargs)


class NoDataError(APIError):
    """The server answered with an empty body."""

    def __init__(self, message: str = "No data received from server", **kwargs):
        super().__init__(message, code="NO_DATA", **kwargs)


class DecodingError(APIError):
    """The response body did not match the expected shape."""

    def __init__(self, detail: str, **kwargs):
        super().__init__(f"Failed to decode response: {detail}", code="DECODING_ERROR", **kwargs)
        self.details["detail"] = detail


class ServerError(APIError):
    """Error reported by the server, carrying its message."""

    def __init__(self, message: str = "Request failed", **kwargs):
        super().__init__(message, code="SERVER_ERROR", **kwargs)


class UnauthorizedError(APIError):
    """Missing or rejected credentials."""

    def __init__(self, message: str = "Your session has expired. Please login again.", **kwargs):
        kwargs.setdefault("status", 401)
        super().__init__(message, code="UNAUTHORIZED", **kwargs)


class InsufficientCreditsError(APIError):
    """The account cannot pay for the requested operation."""

    def __init__(self, required: int = 0, available: int = 0, **kwargs):
        kwargs.setdefault("status", 402)
        super().__init__(
            f"Insufficient credits. Need {required} but only have {available}.",
            code="INSUFFICIENT_CREDITS",
            **kwargs
        )
        self.required = required
        self.available = available
        self.details.update(required=required, available=available, deficit=self.deficit)

    @property
    def deficit(self) -> int:
        return max(self.required - self.available, 0)


class NetworkError(APIError):
    """Transport-level failure."""

    def __init__(self, detail: str = "connection failed", **kwargs):
        super().__init__(f"Network error: {detail}", code="NETWORK_ERROR", **kwargs)


class UnknownError(APIError):
    def __init__(self, message: str = "An unknown error occurred", **kwargs):
        super().__init__(message, code="UNKNOWN", **kwargs)


class GenerationTimeoutError(ServerError):
    """A generation did not finish before the polling deadline."""

    def __init__(self, message: str = "Generation timed out", generation_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if generation_id:
            self.details["generation_id"] = generation_id


# ---------------------------------------------------------------------------
# Authentication errors
# ---------------------------------------------------------------------------

class AuthError(LuidError):
    """Base class for authentication flow errors."""

    default_message = "An unknown error occurred. Please try again."
    default_code = "AUTH_ERROR"

    def __init__(self, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("code", self.default_code)
        super().__init__(message or self.default_message, **kwargs)


class NotAuthenticatedError(AuthError):
    default_message = "You are not authenticated. Please login."
    default_code = "NOT_AUTHENTICATED"


class TokenExpiredError(AuthError):
    default_message = "Your session has expired. Please login again."
    default_code = "TOKEN_EXPIRED"


class AuthNetworkError(AuthError):
    default_message = "Network connection failed. Please check your internet connection."
    default_code = "NETWORK_ERROR"


class AuthHTTPError(AuthError):
    default_code = "HTTP_ERROR"

    def __init__(self, status: int, **kwargs):
        super().__init__(f"Server error ({status}). Please try again later.", status=status, **kwargs)


class AuthAPIError(AuthError):
    """Server message passed through verbatim."""

    default_code = "API_ERROR"


class InvalidCredentialsError(AuthError):
    default_message = "Invalid email or password."
    default_code = "INVALID_CREDENTIALS"


class EmailNotVerifiedError(AuthError):
    default_message = "Please verify your email address."
    default_code = "EMAIL_NOT_VERIFIED"


class WeakPasswordError(AuthError):
    default_message = "Password must be at least 8 characters with uppercase, lowercase, and numbers."
    default_code = "WEAK_PASSWORD"


class EmailAlreadyExistsError(AuthError):
    default_message = "An account with this email already exists."
    default_code = "EMAIL_ALREADY_EXISTS"


class InvalidVerificationCodeError(AuthError):
    default_message = "Invalid or expired verification code."
    default_code = "INVALID_VERIFICATION_CODE"


class AuthUnknownError(AuthError):
    default_code = "UNKNOWN"


def map_api_error_to_auth_error(error: Exception) -> AuthError:
    """
    Translate a request pipeline error into an authentication error.

    Message checks run in a fixed order; the first match wins.

    Args:
        error: The error raised by the API client

    Returns:
        The matching AuthError instance
    """
    if isinstance(error, AuthError):
        return error

    if isinstance(error, UnauthorizedError):
        return TokenExpiredError(original_error=error)

    if isinstance(error, ServerError):
        message = error.message
        if "Invalid email or password" in message:
            return InvalidCredentialsError(original_error=error)
        if "verify your email" in message or "USER_NOT_CONFIRMED" in message:
            return EmailNotVerifiedError(original_error=error)
        if "already exists" in message:
            return EmailAlreadyExistsError(original_error=error)
        if "weak" in message or "Password must" in message:
            return WeakPasswordError(original_error=error)
        if "Invalid" in message and "code" in message:
            return InvalidVerificationCodeError(original_error=error)
        return AuthAPIError(message, status=error.status, original_error=error)

    if isinstance(error, NetworkError):
        return AuthNetworkError(original_error=error)

    return AuthAPIError(str(error), original_error=error)


def is_retryable_error(error: Exception) -> bool:
    """
    Check if an error is retryable.

    Args:
        error: The error to check

    Returns:
        True for transport failures, rate limiting and 5xx server errors
    """
    if isinstance(error, NetworkError):
        return True

    if isinstance(error, GenerationTimeoutError):
        return False

    if isinstance(error, ServerError) and error.status:
        return error.status == 429 or 500 <= error.status < 600

    return False


def create_user_friendly_message(error: Exception) -> str:
    """
    Create a user-friendly error message.

    Args:
        error: Any error raised while talking to the backend

    Returns:
        User-friendly error message
    """
    if isinstance(error, UnauthorizedError):
        return "Session expired. Please login again."

    if isinstance(error, NetworkError):
        return "Network connection failed. Please check your internet connection."

    if isinstance(error, ServerError):
        if "Insufficient credits" in error.message:
            return "You don't have enough credits for this operation."
        if "Model not found" in error.message:
            return "This model is no longer available."
        if "not active" in error.message:
            return "This model is currently unavailable."

    return str(error)
