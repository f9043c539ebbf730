"""
Shared plumbing for LuidGPT API services.
"""

from typing import Any, Optional, TypeVar
from urllib.parse import quote
import logging

from ..core.client import APIClient, ServerError
from ..models import Envelope

logger = logging.getLogger(__name__)

T = TypeVar("T")


def path_segment(value: str) -> str:
    """Percent-encode a value as a single URL path segment (``a/b`` → ``a%2Fb``)."""
    return quote(value, safe="")


def unwrap(envelope: Envelope[T], failure_message: str) -> T:
    """Return the envelope payload, or raise when the backend reports failure."""
    if not envelope.success:
        raise ServerError(failure_message)
    return envelope.data


def check_success(envelope: Any, failure_message: str) -> None:
    if not getattr(envelope, "success", True):
        raise ServerError(getattr(envelope, "message", None) or failure_message)


class BaseService:
    """Base class for services bound to one API client."""

    def __init__(self, client: APIClient):
        self.client = client
