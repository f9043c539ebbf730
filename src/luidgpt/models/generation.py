"""
Generation history records and model execution results.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import ApiDateTime, LuidModel
from .category import OutputType
from .replicate_model import ReplicateModel
from .user import User

IMAGE_MARKERS = (".jpg", ".jpeg", ".png", ".webp", ".gif", "image")
VIDEO_MARKERS = (".mp4", ".webm", ".mov", "video")
AUDIO_MARKERS = (".mp3", ".wav", ".flac", "audio")

_CATEGORY_OUTPUT_TYPES: Dict[str, OutputType] = {
    "video-generation": OutputType.VIDEO,
    "image-generation": OutputType.IMAGE,
    "image-editing": OutputType.IMAGE,
    "upscaling": OutputType.IMAGE,
    "face-avatar": OutputType.IMAGE,
    "audio-speech": OutputType.AUDIO,
    "music-generation": OutputType.AUDIO,
    "3d-models": OutputType.THREE_D,
}


class GenerationStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def is_finished(self) -> bool:
        return self in (GenerationStatus.COMPLETED, GenerationStatus.FAILED, GenerationStatus.CANCELLED)

    @property
    def is_running(self) -> bool:
        return self in (GenerationStatus.PENDING, GenerationStatus.PROCESSING)


def format_execution_time(ms: Optional[int]) -> Optional[str]:
    """Render a duration in milliseconds as ``<1s``, ``4.5s`` or ``2m 5s``."""
    if ms is None:
        return None
    seconds = ms / 1000.0
    if seconds < 1:
        return "<1s"
    if seconds < 60:
        return f"{seconds:.1f}s"
    return f"{int(seconds // 60)}m {int(seconds) % 60}s"


def _contains_any(url: Optional[str], markers) -> bool:
    if not url:
        return False
    lowered = url.lower()
    return any(marker in lowered for marker in markers)


class ModelGeneration(LuidModel):
    """A single model run as stored in the user's history."""

    id: str
    user_id: str = ""
    organization_id: Optional[str] = None
    replicate_model_id: str = ""
    model_id: str
    category_slug: str = ""
    input: Dict[str, Any] = Field(default_factory=dict)
    output: Any = None
    output_url: Optional[str] = None
    output_urls: Optional[List[str]] = None
    status: GenerationStatus = GenerationStatus.PENDING
    error_message: Optional[str] = None
    credits_used: int = 0
    execution_time_ms: Optional[int] = None
    title: Optional[str] = None
    tags: Optional[List[str]] = None
    is_favorite: bool = False
    created_at: Optional[ApiDateTime] = None
    updated_at: Optional[ApiDateTime] = None
    replicate_model: Optional[ReplicateModel] = None

    @property
    def all_output_urls(self) -> List[str]:
        """Primary URL followed by the extra outputs, without duplicates."""
        urls = [self.output_url] if self.output_url else []
        urls.extend(self.output_urls or [])
        return list(dict.fromkeys(urls))

    @property
    def primary_output_url(self) -> Optional[str]:
        if self.output_url:
            return self.output_url
        return self.output_urls[0] if self.output_urls else None

    @property
    def output_type(self) -> OutputType:
        """Guess the artifact kind from the output URL, then from the category."""
        url = self.primary_output_url
        if url:
            if _contains_any(url, (".mp4", ".mov", "video")):
                return OutputType.VIDEO
            if _contains_any(url, (".jpg", ".png", ".webp", "image")):
                return OutputType.IMAGE
            if _contains_any(url, (".mp3", ".wav", "audio")):
                return OutputType.AUDIO
        return _CATEGORY_OUTPUT_TYPES.get(self.category_slug, OutputType.TEXT)

    @property
    def execution_time_display(self) -> Optional[str]:
        return format_execution_time(self.execution_time_ms)

    @property
    def is_image_output(self) -> bool:
        return _contains_any(self.output_url, IMAGE_MARKERS)

    @property
    def is_video_output(self) -> bool:
        return _contains_any(self.output_url, VIDEO_MARKERS)

    @property
    def is_audio_output(self) -> bool:
        return _contains_any(self.output_url, AUDIO_MARKERS)


class Generation(ModelGeneration):
    """Generation record with the joined user and prediction id."""

    replicate_prediction_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    user: Optional[User] = None


class ExecutionModelInfo(LuidModel):
    name: str
    provider: Optional[str] = None
    category: Optional[str] = None


class ExecutionResult(LuidModel):
    """Immediate result of ``POST /models/{id}/run``."""

    id: str
    model_id: str
    status: str
    output_url: Optional[str] = None
    output_urls: Optional[List[str]] = None
    output: Any = None
    execution_time_ms: Optional[int] = None
    credits_used: int = 0
    model: Optional[ExecutionModelInfo] = None

    def to_generation(
        self,
        input: Dict[str, Any],
        organization_id: Optional[str] = None,
        title: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> ModelGeneration:
        """Build a history record from the run result and the request that produced it."""
        try:
            status = GenerationStatus(self.status)
        except ValueError:
            status = GenerationStatus.PENDING
        return ModelGeneration(
            id=self.id,
            organization_id=organization_id,
            model_id=self.model_id,
            category_slug=(self.model.category if self.model and self.model.category else "unknown"),
            input=input,
            output=self.output,
            output_url=self.output_url,
            output_urls=self.output_urls,
            status=status,
            credits_used=self.credits_used,
            execution_time_ms=self.execution_time_ms,
            title=title,
            tags=tags,
        )


class ExecuteModelResponse(LuidModel):
    success: bool = True
    data: ExecutionResult
    credits_deducted: Optional[int] = Field(default=None, alias="credits_deducted")
    credit_request_id: Optional[str] = Field(default=None, alias="credit_request_id")


class GenerationStats(LuidModel):
    total: int = 0
    completed: int = 0
    failed: int = 0
    processing: int = 0
    total_credits_used: int = 0
