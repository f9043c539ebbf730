"""
HTTP request pipeline for the LuidGPT backends.

Every service call goes through `APIClient.request`: it builds the URL,
injects the bearer token, sends the request with httpx, maps failure
statuses onto the API error family and decodes the JSON body into a
pydantic model.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from ... import USER_AGENT
from ..storage import BaseTokenStore
from .errors import (
    APIError,
    DecodingError,
    InsufficientCreditsError,
    InvalidURLError,
    NetworkError,
    NoDataError,
    ServerError,
    UnauthorizedError,
)
from .retry import RetryConfig, RetryManager

logger = logging.getLogger(__name__)

T = TypeVar("T")

SENSITIVE_FIELDS = frozenset({"password", "newPassword", "oldPassword", "currentPassword", "refreshToken"})


def redact(parameters: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return a copy of request parameters that is safe to log."""
    if parameters is None:
        return None
    return {key: ("***" if key in SENSITIVE_FIELDS else value) for key, value in parameters.items()}


def encode_query(parameters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Stringify query parameters, dropping unset values."""
    query: Dict[str, str] = {}
    for key, value in (parameters or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


class APIClient:
    """
    Async JSON client for one LuidGPT backend.

    Args:
        base_url: Backend root, e.g. ``http://localhost:3001/api``
        token_store: Where the access token is read from (and cleared on 401)
        request_timeout: Per-read timeout in seconds
        resource_timeout: Limit for a whole request in seconds
        clear_on_unauthorized: Wipe stored credentials when the server answers 401
        retry_config: Backoff settings for GET requests
        transport: Optional httpx transport, mainly for tests
    """

    def __init__(
        self,
        base_url: str,
        token_store: BaseTokenStore,
        request_timeout: float = 30.0,
        resource_timeout: float = 60.0,
        clear_on_unauthorized: bool = True,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.request_timeout = request_timeout
        self.resource_timeout = resource_timeout
        self.clear_on_unauthorized = clear_on_unauthorized
        self.retry_manager = RetryManager(retry_config)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(request_timeout),
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the underlying connection pool."""
        await self._client.aclose()

    # Verb helpers

    async def get(self, endpoint: str, parameters: Optional[Mapping[str, Any]] = None,
                  requires_auth: bool = True, response_model: Optional[Type[T]] = None) -> Any:
        return await self.request("GET", endpoint, parameters, requires_auth, response_model)

    async def post(self, endpoint: str, parameters: Optional[Mapping[str, Any]] = None,
                   requires_auth: bool = True, response_model: Optional[Type[T]] = None) -> Any:
        return await self.request("POST", endpoint, parameters, requires_auth, response_model)

    async def put(self, endpoint: str, parameters: Optional[Mapping[str, Any]] = None,
                  requires_auth: bool = True, response_model: Optional[Type[T]] = None) -> Any:
        return await self.request("PUT", endpoint, parameters, requires_auth, response_model)

    async def patch(self, endpoint: str, parameters: Optional[Mapping[str, Any]] = None,
                    requires_auth: bool = True, response_model: Optional[Type[T]] = None) -> Any:
        return await self.request("PATCH", endpoint, parameters, requires_auth, response_model)

    async def delete(self, endpoint: str, parameters: Optional[Mapping[str, Any]] = None,
                     requires_auth: bool = True, response_model: Optional[Type[T]] = None) -> Any:
        return await self.request("DELETE", endpoint, parameters, requires_auth, response_model)

    async def request(
        self,
        method: str,
        endpoint: str,
        parameters: Optional[Mapping[str, Any]] = None,
        requires_auth: bool = True,
        response_model: Optional[Type[T]] = None,
    ) -> Any:
        """
        Send a JSON request and decode the response.

        GET parameters travel in the query string, every other verb sends
        them as a JSON body. Idempotent GETs are retried when retries are
        configured.

        Args:
            method: HTTP verb
            endpoint: Path relative to the base URL
            parameters: Query items or JSON body
            requires_auth: Attach the stored bearer token
            response_model: Type to validate the JSON body against

        Returns:
            The decoded model, or the parsed JSON when no model is given

        Raises:
            APIError: One of the API error family
        """
        method = method.upper()

        async def attempt() -> Any:
            return await self._send(method, endpoint, parameters, requires_auth, response_model)

        if method == "GET" and self.retry_manager.enabled:
            return await self.retry_manager.retry(attempt, description=f"GET {endpoint}")
        return await attempt()

    async def upload_file(
        self,
        endpoint: str,
        file_data: bytes,
        file_name: str,
        mime_type: str,
        parameters: Optional[Mapping[str, str]] = None,
        requires_auth: bool = True,
        response_model: Optional[Type[T]] = None,
    ) -> Any:
        """Upload a file as multipart form data under the ``file`` field."""
        url = self._build_url(endpoint)
        headers = self._auth_headers(requires_auth)

        logger.debug(f"Upload: POST {url} ({file_name}, {len(file_data)} bytes)")
        try:
            response = await asyncio.wait_for(
                self._client.post(
                    url,
                    headers=headers,
                    files={"file": (file_name, file_data, mime_type)},
                    data=dict(parameters or {}),
                ),
                timeout=self.resource_timeout,
            )
        except APIError:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkError("The request timed out.", original_error=e) from e
        except Exception as e:
            raise NetworkError(str(e) or type(e).__name__, original_error=e) from e

        logger.debug(f"Upload status: {response.status_code}")
        if not 200 <= response.status_code < 300:
            raise ServerError(f"Upload failed with status {response.status_code}", status=response.status_code)

        return self._decode(response, response_model)

    # Pipeline internals

    def _build_url(self, endpoint: str) -> httpx.URL:
        try:
            url = httpx.URL(self.base_url + endpoint)
        except (httpx.InvalidURL, TypeError) as e:
            raise InvalidURLError(original_error=e) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURLError()
        return url

    def _auth_headers(self, requires_auth: bool) -> Dict[str, str]:
        if not requires_auth:
            return {}
        token = self.token_store.get_access_token()
        if not token:
            raise UnauthorizedError()
        return {"Authorization": f"Bearer {token}"}

    async def _send(
        self,
        method: str,
        endpoint: str,
        parameters: Optional[Mapping[str, Any]],
        requires_auth: bool,
        response_model: Optional[Type[T]],
    ) -> Any:
        url = self._build_url(endpoint)
        headers = {"Content-Type": "application/json"}
        headers.update(self._auth_headers(requires_auth))

        params = None
        content = None
        if method == "GET":
            params = encode_query(parameters) or None
        elif parameters is not None:
            content = json.dumps(dict(parameters)).encode("utf-8")

        logger.debug(f"Request: {method} {url}")
        if content is not None:
            logger.debug(f"Request body: {redact(parameters)}")

        try:
            response = await asyncio.wait_for(
                self._client.request(method, url, params=params, content=content, headers=headers),
                timeout=self.resource_timeout,
            )
        except APIError:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkError("The request timed out.", original_error=e) from e
        except Exception as e:
            raise NetworkError(str(e) or type(e).__name__, original_error=e) from e

        logger.debug(f"Response status: {response.status_code}")
        logger.debug(f"Response data size: {len(response.content)} bytes")

        self._raise_for_status(response)
        return self._decode(response, response_model)

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code

        if status == 401:
            if self.clear_on_unauthorized:
                self.token_store.clear_all()
            raise UnauthorizedError()

        if status == 402:
            body = self._error_body(response)
            if body is None:
                raise ServerError("Insufficient credits", status=402)
            details = body.get("details") or {}
            if not isinstance(details, dict):
                details = {}
            raise InsufficientCreditsError(
                required=_as_int(details.get("required")),
                available=_as_int(details.get("available")),
            )

        if status >= 400:
            details: Dict[str, Any] = {}
            retry_after = response.headers.get("Retry-After")
            if retry_after:
                details["retry_after"] = retry_after

            body = self._error_body(response)
            if body is None:
                raise ServerError(f"Request failed with status {status}", status=status, details=details)
            message = body.get("error") or body.get("message") or "Request failed"
            if body.get("code"):
                details["server_code"] = body["code"]
            raise ServerError(str(message), status=status, details=details)

    @staticmethod
    def _error_body(response: httpx.Response) -> Optional[Dict[str, Any]]:
        try:
            body = response.json()
        except ValueError:
            return None
        return body if isinstance(body, dict) else None

    def _decode(self, response: httpx.Response, response_model: Optional[Type[T]]) -> Any:
        if not response.content:
            if response_model is not None:
                raise NoDataError(status=response.status_code)
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Decoding error: {e}")
            logger.warning(f"Raw data: {response.text[:2000]}")
            raise DecodingError(str(e), original_error=e) from e

        if response_model is None:
            return data

        try:
            return TypeAdapter(response_model).validate_python(data)
        except ValidationError as e:
            logger.warning(f"Decoding error: {e}")
            logger.warning(f"Raw data: {response.text[:2000]}")
            raise DecodingError(str(e), original_error=e) from e


class LuidhubClient(APIClient):
    """Client for the Luidhub credit service; a 401 leaves stored credentials in place."""

    def __init__(self, base_url: str, token_store: BaseTokenStore, **kwargs):
        kwargs["clear_on_unauthorized"] = False
        super().__init__(base_url, token_store, **kwargs)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
