"""
Runnable AI models from the marketplace registry.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import LuidModel, PaginationInfo
from .category import Category

SPEED_ESTIMATES: Dict[str, str] = {
    "instant": "<5s",
    "fast": "5-30s",
    "standard": "30s-2m",
    "slow": "2m+",
}


class Tier(str, Enum):
    FREE = "free"
    STANDARD = "standard"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class InputProperty(LuidModel):
    """One parameter of a model's input form (JSON-schema subset)."""

    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    default: Any = None
    enum: Optional[List[Any]] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    format: Optional[str] = None


class InputSchema(LuidModel):
    type: Optional[str] = None
    properties: Dict[str, InputProperty] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)

    def is_required(self, name: str) -> bool:
        return name in self.required


class ReplicateModel(LuidModel):
    """A model as listed by the registry, e.g. ``openai/sora-2``."""

    id: str
    model_id: str
    name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    provider: Optional[str] = None
    version: Optional[str] = None
    credit_cost: Optional[int] = None
    estimated_time_seconds: Optional[int] = None
    input_schema: Optional[InputSchema] = None
    supported_features: Optional[List[str]] = None
    tier: Tier = Tier.STANDARD
    max_resolution: Optional[str] = None
    is_active: bool = True
    is_featured: bool = False
    is_new: Optional[bool] = None
    thumbnail_url: Optional[str] = None
    cover_image: Optional[str] = None
    output_type: Optional[str] = None
    example_outputs: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    run_count: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    category: Optional[Category] = None

    @property
    def display_image(self) -> Optional[str]:
        return self.cover_image or self.thumbnail_url

    @property
    def category_slug(self) -> str:
        return self.category.slug if self.category else "utility"

    @property
    def effective_credit_cost(self) -> int:
        """Model price, else the category default, else 2."""
        if self.credit_cost is not None:
            return self.credit_cost
        if self.category is not None:
            return self.category.credit_cost_default
        return 2

    @property
    def provider_display_name(self) -> Optional[str]:
        if self.provider is None:
            return None
        return " ".join(part.capitalize() for part in self.provider.split("-"))

    @property
    def estimated_time_display(self) -> Optional[str]:
        seconds = self.estimated_time_seconds
        if seconds is None:
            return None
        if seconds < 5:
            return "<5s"
        if seconds < 60:
            return f"{seconds}s"
        return f"{seconds // 60}m"

    def has_tag(self, tag: str) -> bool:
        return tag in (self.tags or [])

    def tags_with_prefix(self, prefix: str) -> List[str]:
        """Tags starting with `prefix`, with the prefix removed."""
        return [tag[len(prefix):] for tag in (self.tags or []) if tag.startswith(prefix)]

    @property
    def style_tags(self) -> List[str]:
        return self.tags_with_prefix("style:")

    @property
    def speed_tag(self) -> Optional[str]:
        values = self.tags_with_prefix("speed:")
        return values[0] if values else None

    @property
    def quality_tag(self) -> Optional[str]:
        values = self.tags_with_prefix("quality:")
        return values[0] if values else None

    @property
    def speed_estimate(self) -> str:
        return SPEED_ESTIMATES.get(self.speed_tag or "", "~30s")


class ModelsPage(LuidModel):
    """Category listing or search result."""

    success: bool = True
    data: List[ReplicateModel] = Field(default_factory=list)
    pagination: Optional[PaginationInfo] = None
    category: Optional[Category] = None

    @property
    def models(self) -> List[ReplicateModel]:
        return self.data
