"""
Model catalog and execution service.

Model ids look like ``openai/sora-2`` and travel as one encoded path
segment. Catalog reads are public; running a model needs a signed-in user
and is paid for in credits.
"""

from typing import Any, Dict, List, Optional, Tuple, Union
import logging

from ..core.client import ServerError
from ..models import (
    Category,
    Envelope,
    ExecuteModelResponse,
    InputSchema,
    LuidModel,
    ModelGeneration,
    ModelsPage,
    PaginationInfo,
    ReplicateModel,
)
from .base import BaseService, path_segment, unwrap

logger = logging.getLogger(__name__)


class SchemaData(LuidModel):
    input_schema: InputSchema
    model_id: Optional[str] = None


class ModelsService(BaseService):
    """Browse categories and models, fetch input schemas and run models."""

    # Categories

    async def get_categories(self) -> List[Category]:
        envelope = await self.client.get(
            "/models/categories", requires_auth=False, response_model=Envelope[List[Category]],
        )
        return unwrap(envelope, "Failed to fetch categories")

    async def get_category(self, slug: str) -> Category:
        envelope = await self.client.get(
            f"/models/categories/{path_segment(slug)}",
            requires_auth=False,
            response_model=Envelope[Union[Category, List[Category]]],
        )
        data = unwrap(envelope, "Failed to fetch category")
        if isinstance(data, list):
            if not data:
                raise ServerError(f"Category not found: {slug}", status=404)
            return data[0]
        return data

    async def get_category_models(
        self,
        slug: str,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ReplicateModel], Optional[PaginationInfo], Optional[Category]]:
        """One page of a category's models plus its pagination and category record."""
        result = await self.client.get(
            f"/models/categories/{path_segment(slug)}/models",
            {"page": page, "limit": limit},
            requires_auth=False,
            response_model=ModelsPage,
        )
        return result.models, result.pagination, result.category

    # Models

    async def search_models(
        self,
        query: str,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ReplicateModel], Optional[PaginationInfo]]:
        result = await self.client.get(
            "/models/search",
            {"q": query, "page": page, "limit": limit},
            requires_auth=False,
            response_model=ModelsPage,
        )
        return result.models, result.pagination

    async def get_featured_models(self, limit: int = 10) -> List[ReplicateModel]:
        result = await self.client.get(
            "/models/featured", {"limit": limit}, requires_auth=False, response_model=ModelsPage,
        )
        return result.models

    async def get_model(self, model_id: str) -> ReplicateModel:
        envelope = await self.client.get(
            f"/models/{path_segment(model_id)}",
            requires_auth=False,
            response_model=Envelope[ReplicateModel],
        )
        return unwrap(envelope, "Failed to fetch model details")

    async def get_model_schema(self, model_id: str) -> InputSchema:
        envelope = await self.client.get(
            f"/models/{path_segment(model_id)}/schema",
            requires_auth=False,
            response_model=Envelope[SchemaData],
        )
        return unwrap(envelope, "Failed to fetch model schema").input_schema

    # Execution

    async def execute_model(
        self,
        model_id: str,
        input: Dict[str, Any],
        organization_id: Optional[str] = None,
        title: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> ModelGeneration:
        """
        Run a model and return the resulting generation record.

        Args:
            model_id: Registry id, e.g. ``openai/sora-2``
            input: Parameters matching the model's input schema
            organization_id: Workspace to charge instead of the user
            title: Optional label stored with the generation
            tags: Optional tags stored with the generation

        Raises:
            ValueError: If `input` is empty
            InsufficientCreditsError: If the balance cannot cover the run
        """
        if not input:
            raise ValueError("Input parameters are required")

        logger.info(f"Running model {model_id}")
        response = await self.client.post(
            f"/models/{path_segment(model_id)}/run",
            {"input": input, "organizationId": organization_id, "title": title, "tags": tags},
            response_model=ExecuteModelResponse,
        )
        if not response.success:
            raise ServerError("Failed to execute model")

        if response.credits_deducted is not None:
            logger.info(f"{response.credits_deducted} credits deducted")
        return response.data.to_generation(input, organization_id=organization_id, title=title, tags=tags)

    async def run_model_with_file(
        self,
        model_id: str,
        file_data: bytes,
        file_name: str,
        mime_type: str,
        parameters: Optional[Dict[str, str]] = None,
    ) -> ModelGeneration:
        """Run a model whose input is an uploaded file (sent as multipart ``file``)."""
        response = await self.client.upload_file(
            f"/models/{path_segment(model_id)}/run",
            file_data,
            file_name,
            mime_type,
            parameters=parameters,
            response_model=ExecuteModelResponse,
        )
        if not response.success:
            raise ServerError("Failed to execute model")
        return response.data.to_generation(dict(parameters or {}))
