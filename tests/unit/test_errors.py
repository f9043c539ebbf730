"""Tests for the API and authentication error families."""

import pytest

from luidgpt.core.client import (
    AuthAPIError,
    AuthError,
    AuthHTTPError,
    AuthNetworkError,
    DecodingError,
    EmailAlreadyExistsError,
    EmailNotVerifiedError,
    GenerationTimeoutError,
    InsufficientCreditsError,
    InvalidCredentialsError,
    InvalidVerificationCodeError,
    NetworkError,
    ServerError,
    TokenExpiredError,
    UnauthorizedError,
    WeakPasswordError,
    create_user_friendly_message,
    is_retryable_error,
    map_api_error_to_auth_error,
)


class TestApiErrors:

    def test_insufficient_credits_message_and_deficit(self) -> None:
        error = InsufficientCreditsError(required=10, available=4)
        assert error.message == "Insufficient credits. Need 10 but only have 4."
        assert error.status == 402
        assert error.deficit == 6
        assert error.details["deficit"] == 6

    def test_deficit_never_negative(self) -> None:
        assert InsufficientCreditsError(required=2, available=5).deficit == 0

    def test_unauthorized_defaults(self) -> None:
        error = UnauthorizedError()
        assert error.status == 401
        assert str(error) == "Your session has expired. Please login again."

    def test_decoding_and_network_messages(self) -> None:
        assert DecodingError("bad json").message == "Failed to decode response: bad json"
        assert NetworkError("timed out").message == "Network error: timed out"

    def test_to_dict(self) -> None:
        data = ServerError("Model not found", status=404).to_dict()
        assert data == {
            "message": "Model not found",
            "status": 404,
            "code": "SERVER_ERROR",
            "details": {},
            "type": "ServerError",
        }

    def test_generation_timeout_records_id(self) -> None:
        error = GenerationTimeoutError(generation_id="gen-1")
        assert isinstance(error, ServerError)
        assert error.details["generation_id"] == "gen-1"


class TestAuthErrors:

    def test_default_messages(self) -> None:
        assert InvalidCredentialsError().message == "Invalid email or password."
        assert TokenExpiredError().code == "TOKEN_EXPIRED"
        assert AuthHTTPError(503).message == "Server error (503). Please try again later."

    @pytest.mark.parametrize("message, expected", [
        ("Invalid email or password", InvalidCredentialsError),
        ("Please verify your email first", EmailNotVerifiedError),
        ("USER_NOT_CONFIRMED", EmailNotVerifiedError),
        ("User already exists", EmailAlreadyExistsError),
        ("Password must contain a number", WeakPasswordError),
        ("password too weak", WeakPasswordError),
        ("Invalid verification code provided", InvalidVerificationCodeError),
    ])
    def test_server_messages_are_classified(self, message: str, expected: type) -> None:
        mapped = map_api_error_to_auth_error(ServerError(message, status=400))
        assert isinstance(mapped, expected)

    def test_unmatched_server_message_passes_through(self) -> None:
        mapped = map_api_error_to_auth_error(ServerError("Rate limit exceeded", status=429))
        assert isinstance(mapped, AuthAPIError)
        assert mapped.message == "Rate limit exceeded"
        assert mapped.status == 429

    def test_unauthorized_and_network(self) -> None:
        assert isinstance(map_api_error_to_auth_error(UnauthorizedError()), TokenExpiredError)
        assert isinstance(map_api_error_to_auth_error(NetworkError("down")), AuthNetworkError)

    def test_auth_error_is_returned_unchanged(self) -> None:
        error = WeakPasswordError()
        assert map_api_error_to_auth_error(error) is error

    def test_original_error_is_kept(self) -> None:
        source = ServerError("Invalid email or password")
        mapped = map_api_error_to_auth_error(source)
        assert isinstance(mapped, AuthError)
        assert mapped.original_error is source


class TestErrorHelpers:

    def test_retryable_errors(self) -> None:
        assert is_retryable_error(NetworkError("reset"))
        assert is_retryable_error(ServerError("busy", status=503))
        assert is_retryable_error(ServerError("slow down", status=429))

    def test_non_retryable_errors(self) -> None:
        assert not is_retryable_error(ServerError("bad", status=400))
        assert not is_retryable_error(ServerError("no status"))
        assert not is_retryable_error(UnauthorizedError())
        assert not is_retryable_error(GenerationTimeoutError(status=504))
        assert not is_retryable_error(ValueError("x"))

    def test_user_friendly_messages(self) -> None:
        assert create_user_friendly_message(UnauthorizedError()) == "Session expired. Please login again."
        assert create_user_friendly_message(NetworkError("x")) == (
            "Network connection failed. Please check your internet connection."
        )
        assert create_user_friendly_message(ServerError("Insufficient credits")) == (
            "You don't have enough credits for this operation."
        )
        assert create_user_friendly_message(ServerError("Model not found")) == "This model is no longer available."
        assert create_user_friendly_message(ServerError("Model is not active")) == (
            "This model is currently unavailable."
        )
        assert create_user_friendly_message(ServerError("Something else")) == "Something else"
