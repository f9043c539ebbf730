"""
HTTP client package for LuidGPT.

This package provides the request pipeline used by every service, the
structured error family it raises and optional retry handling for GETs.
"""

from .errors import (
    LuidError,
    APIError,
    InvalidURLError,
    NoDataError,
    DecodingError,
    ServerError,
    UnauthorizedError,
    InsufficientCreditsError,
    NetworkError,
    UnknownError,
    GenerationTimeoutError,
    AuthError,
    NotAuthenticatedError,
    TokenExpiredError,
    AuthNetworkError,
    AuthHTTPError,
    AuthAPIError,
    InvalidCredentialsError,
    EmailNotVerifiedError,
    WeakPasswordError,
    EmailAlreadyExistsError,
    InvalidVerificationCodeError,
    AuthUnknownError,
    map_api_error_to_auth_error,
    create_user_friendly_message,
    is_retryable_error,
)
from .retry import RetryConfig, RetryManager
from .http import APIClient, LuidhubClient

__all__ = [
    # Clients
    "APIClient",
    "LuidhubClient",
    "RetryConfig",
    "RetryManager",

    # API errors
    "LuidError",
    "APIError",
    "InvalidURLError",
    "NoDataError",
    "DecodingError",
    "ServerError",
    "UnauthorizedError",
    "InsufficientCreditsError",
    "NetworkError",
    "UnknownError",
    "GenerationTimeoutError",

    # Auth errors
    "AuthError",
    "NotAuthenticatedError",
    "TokenExpiredError",
    "AuthNetworkError",
    "AuthHTTPError",
    "AuthAPIError",
    "InvalidCredentialsError",
    "EmailNotVerifiedError",
    "WeakPasswordError",
    "EmailAlreadyExistsError",
    "InvalidVerificationCodeError",
    "AuthUnknownError",

    # Helpers
    "map_api_error_to_auth_error",
    "create_user_friendly_message",
    "is_retryable_error",
]
