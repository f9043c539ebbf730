"""
Shared pydantic building blocks for LuidGPT data models.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

API_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def parse_api_datetime(value: Any) -> Any:
    """
    Parse a backend timestamp into an aware UTC datetime.

    The backend writes ``2024-05-01T12:30:00.123Z``; plain ISO-8601 values
    (with or without fractional seconds or offset) are accepted too. Values
    that are not strings are left for pydantic to validate.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            parsed = datetime.strptime(text, API_DATE_FORMAT)
        except ValueError:
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                return value
    else:
        return value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_api_datetime(value: datetime) -> str:
    """Format a datetime the way the backend writes it."""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


ApiDateTime = Annotated[
    datetime,
    BeforeValidator(parse_api_datetime),
    PlainSerializer(format_api_datetime, return_type=str, when_used="json"),
]


def compact_count(value: int) -> str:
    """Render a credit count, shortening thousands to ``1.2k``."""
    if value >= 1000:
        return f"{value / 1000:.1f}k"
    return str(value)


def initials_of(text: str) -> str:
    words = text.split()
    if len(words) >= 2:
        return (words[0][:1] + words[1][:1]).upper()
    return text[:2].upper()


class LuidModel(BaseModel):
    """Base model for luidgpt-backend payloads (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        protected_namespaces=(),
    )


class SnakeModel(BaseModel):
    """Base model for Luidhub payloads, which use snake_case keys."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, protected_namespaces=())


class PaginationInfo(LuidModel):
    """
    Paging metadata.

    The backend reports ``pages``; Luidhub reports ``total_pages`` and
    ``has_more``. Both shapes decode into this model.
    """

    page: int = 1
    limit: int = 20
    total: int = 0
    pages: int = Field(default=0, validation_alias=AliasChoices("pages", "totalPages", "total_pages"))
    has_more: bool = Field(default=False, validation_alias=AliasChoices("hasMore", "has_more"))

    @model_validator(mode="after")
    def _derive_has_more(self) -> "PaginationInfo":
        if "has_more" not in self.model_fields_set:
            self.has_more = self.page < self.pages
        return self


class MessageResponse(LuidModel):
    success: bool = True
    message: Optional[str] = None


DataT = TypeVar("DataT")


class Envelope(LuidModel, Generic[DataT]):
    """``{"success": ..., "data": ...}`` wrapper used by most endpoints."""

    success: bool = True
    data: DataT
    message: Optional[str] = None
    pagination: Optional[PaginationInfo] = None
