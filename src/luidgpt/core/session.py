"""
Session facade for LuidGPT.

`LuidGPT` wires settings, credential storage, both HTTP clients and every
service together so callers need a single object:

    async with LuidGPT() as luid:
        user = await luid.auth.login(email, password)
        balance = await luid.credits.get_balance()
"""

from typing import Optional
import logging

import httpx

from ..config import LuidSettings, get_settings
from ..services import (
    AuthService,
    CreditService,
    GenerationsService,
    ModelsService,
    UserService,
    WorkspacesService,
)
from .client import APIClient, LuidhubClient, RetryConfig
from .storage import BaseTokenStore, TokenStore

logger = logging.getLogger(__name__)


class LuidGPT:
    """
    Entry point to the LuidGPT API.

    Args:
        settings: Settings to use (loaded from the environment when omitted)
        token_store: Credential store (keyring-backed by default)
        transport: Optional httpx transport shared by both clients
    """

    def __init__(
        self,
        settings: Optional[LuidSettings] = None,
        token_store: Optional[BaseTokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.token_store = token_store or TokenStore(
            service=self.settings.keyring_service,
            fallback_path=self.settings.credentials_file_path,
            use_keyring=self.settings.use_keyring,
        )

        client_options = dict(
            request_timeout=self.settings.request_timeout,
            resource_timeout=self.settings.resource_timeout,
            retry_config=RetryConfig.from_max_retries(self.settings.max_retries),
            transport=transport,
        )
        self.api_client = APIClient(self.settings.api_base_url, self.token_store, **client_options)
        self.luidhub_client = LuidhubClient(self.settings.luidhub_base_url, self.token_store, **client_options)

        self.auth = AuthService(self.api_client, self.token_store)
        self.users = UserService(self.api_client)
        self.models = ModelsService(self.api_client)
        self.generations = GenerationsService(self.api_client)
        self.workspaces = WorkspacesService(self.api_client)
        self.credits = CreditService(self.luidhub_client)

        logger.debug(f"LuidGPT session for {self.settings.api_base_url}")

    async def __aenter__(self) -> "LuidGPT":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close both HTTP clients."""
        await self.api_client.close()
        await self.luidhub_client.close()
