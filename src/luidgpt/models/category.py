"""
Model categories.

The marketplace groups its models into eleven fixed categories. The table
below mirrors the backend so listings can be labelled offline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .base import ApiDateTime, LuidModel


class OutputType(str, Enum):
    """Kind of artifact a category produces."""
    VIDEO = "video"
    IMAGE = "image"
    AUDIO = "audio"
    TEXT = "text"
    THREE_D = "3d"
    UTILITY = "utility"


class Category(LuidModel):
    id: str
    slug: str
    name: str
    description: Optional[str] = None
    icon_emoji: Optional[str] = None
    credit_cost_default: int = 2
    output_type: OutputType
    sort_order: int = 0
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[ApiDateTime] = None
    updated_at: Optional[ApiDateTime] = None
    model_count: Optional[int] = None

    @property
    def icon(self) -> str:
        return category_icon(self.slug)


@dataclass(frozen=True)
class CategoryDefinition:
    slug: str
    name: str
    description: str
    icon: str
    output_type: OutputType
    sort_order: int


CATEGORY_DEFINITIONS: List[CategoryDefinition] = [
    CategoryDefinition("video-generation", "Video Generation",
                       "Generate videos from text prompts or images",
                       "video.fill", OutputType.VIDEO, 1),
    CategoryDefinition("image-generation", "Image Generation",
                       "Generate images from text prompts",
                       "photo.fill", OutputType.IMAGE, 2),
    CategoryDefinition("image-editing", "Image Editing",
                       "Edit, enhance, and transform images",
                       "wand.and.stars", OutputType.IMAGE, 3),
    CategoryDefinition("text-generation", "Text Generation",
                       "Large language models for text generation",
                       "message.fill", OutputType.TEXT, 4),
    CategoryDefinition("audio-speech", "Audio & Speech",
                       "Text-to-speech, voice cloning, and audio generation",
                       "mic.fill", OutputType.AUDIO, 5),
    CategoryDefinition("music-generation", "Music Generation",
                       "Generate music and songs with AI",
                       "music.note", OutputType.AUDIO, 6),
    CategoryDefinition("upscaling", "Upscaling",
                       "Enhance image and video resolution",
                       "arrow.up.right.square.fill", OutputType.IMAGE, 7),
    CategoryDefinition("vision-documents", "Vision & Documents",
                       "OCR, document analysis, and visual understanding",
                       "doc.text.magnifyingglass", OutputType.TEXT, 8),
    CategoryDefinition("3d-models", "3D Models",
                       "Generate 3D content from images or text",
                       "cube.fill", OutputType.THREE_D, 9),
    CategoryDefinition("face-avatar", "Face & Avatar",
                       "Face generation, swapping, and avatar creation",
                       "person.fill", OutputType.IMAGE, 10),
    CategoryDefinition("utility", "Utility",
                       "Background removal, NSFW detection, and other utilities",
                       "wrench.and.screwdriver.fill", OutputType.UTILITY, 11),
]

DEFAULT_ICON = "square.grid.2x2"

_DEFAULT_CREDITS: Dict[str, int] = {
    "video-generation": 10,
    "image-generation": 2,
    "image-editing": 2,
    "text-generation": 1,
    "audio-speech": 3,
    "music-generation": 5,
    "upscaling": 2,
    "vision-documents": 1,
    "3d-models": 8,
    "face-avatar": 5,
    "utility": 1,
}


def category_definition(slug: str) -> Optional[CategoryDefinition]:
    return next((d for d in CATEGORY_DEFINITIONS if d.slug == slug), None)


def category_icon(slug: str) -> str:
    """Icon name for a category slug."""
    definition = category_definition(slug)
    return definition.icon if definition else DEFAULT_ICON


def default_credits(slug: str) -> int:
    """Credit cost charged by a category when a model sets none."""
    return _DEFAULT_CREDITS.get(slug, 2)
