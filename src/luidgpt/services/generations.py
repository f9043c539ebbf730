"""
Generation history service.

Lists, updates and cancels the signed-in user's model runs and can poll a
run until it reaches a finished status.
"""

from typing import Any, Dict, List, Optional, Tuple
import asyncio
import logging
import time

from ..core.client import GenerationTimeoutError, ServerError
from ..models import Envelope, MessageResponse, ModelGeneration, PaginationInfo
from .base import BaseService, path_segment, unwrap

logger = logging.getLogger(__name__)

GENERATIONS_PATH = "/models/user/generations"

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_POLL_TIMEOUT = 300.0


class GenerationsService(BaseService):
    """Access to ``/models/user/generations``."""

    async def list_generations(
        self,
        page: int = 1,
        limit: int = 20,
        organization_id: Optional[str] = None,
        category_slug: Optional[str] = None,
        model_id: Optional[str] = None,
        status: Optional[str] = None,
        favorite: Optional[bool] = None,
    ) -> Tuple[List[ModelGeneration], Optional[PaginationInfo]]:
        """
        Fetch one page of history, optionally filtered.

        Only ``favorite=True`` is sent; the backend has no "not favorite" filter.

        Returns:
            Tuple of (generations, pagination)
        """
        params: Dict[str, Any] = {
            "page": page,
            "limit": limit,
            "organizationId": organization_id,
            "categorySlug": category_slug,
            "modelId": model_id,
            "status": status,
        }
        if favorite:
            params["favorite"] = True

        envelope = await self.client.get(
            GENERATIONS_PATH, params, response_model=Envelope[List[ModelGeneration]],
        )
        return unwrap(envelope, "Failed to fetch generations"), envelope.pagination

    async def get_generation(self, generation_id: str) -> ModelGeneration:
        envelope = await self.client.get(
            f"{GENERATIONS_PATH}/{path_segment(generation_id)}",
            response_model=Envelope[ModelGeneration],
        )
        return unwrap(envelope, "Failed to fetch generation")

    async def update_generation(
        self,
        generation_id: str,
        is_favorite: Optional[bool] = None,
        title: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> ModelGeneration:
        """PATCH only the fields that were given."""
        params: Dict[str, Any] = {}
        if is_favorite is not None:
            params["isFavorite"] = is_favorite
        if title is not None:
            params["title"] = title
        if tags is not None:
            params["tags"] = tags

        envelope = await self.client.patch(
            f"{GENERATIONS_PATH}/{path_segment(generation_id)}",
            params,
            response_model=Envelope[ModelGeneration],
        )
        return unwrap(envelope, "Failed to update generation")

    async def toggle_favorite(self, generation: ModelGeneration) -> ModelGeneration:
        return await self.update_generation(generation.id, is_favorite=not generation.is_favorite)

    async def delete_generation(self, generation_id: str) -> None:
        response = await self.client.delete(
            f"{GENERATIONS_PATH}/{path_segment(generation_id)}", response_model=MessageResponse,
        )
        if not response.success:
            raise ServerError(response.message or "Failed to delete generation")

    async def cancel_generation(self, generation_id: str) -> ModelGeneration:
        envelope = await self.client.post(
            f"{GENERATIONS_PATH}/{path_segment(generation_id)}/cancel",
            response_model=Envelope[ModelGeneration],
        )
        return unwrap(envelope, "Failed to cancel generation")

    async def wait_for_generation(
        self,
        generation_id: str,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_POLL_TIMEOUT,
    ) -> ModelGeneration:
        """
        Poll a generation until it is completed, failed or cancelled.

        Raises:
            GenerationTimeoutError: If it is still running after `timeout` seconds
        """
        deadline = time.monotonic() + timeout
        while True:
            generation = await self.get_generation(generation_id)
            if generation.status.is_finished:
                logger.info(f"Generation {generation_id} finished: {generation.status.value}")
                return generation

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise GenerationTimeoutError(generation_id=generation_id)

            logger.debug(f"Generation {generation_id} is {generation.status.value}, checking again in {interval}s")
            await asyncio.sleep(min(interval, remaining))
